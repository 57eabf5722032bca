"""Employer and verification schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from shiftlink.schemas.base import CamelModel


class EmployerProfileResponse(CamelModel):
    """Public employer profile."""

    id: UUID
    user_id: UUID
    name: str
    email: str
    company_name: str
    industry: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    logo: Optional[str] = None
    is_verified: bool
    is_flagged: bool
    flag_reason: Optional[str] = None
    created_at: datetime


class EmployerStatsResponse(CamelModel):
    profile: EmployerProfileResponse
    total_jobs: int
    total_applications: int


class EmployerUpdate(CamelModel):
    """Fields an employer may change on their own profile."""

    company_name: Optional[str] = Field(None, min_length=1, max_length=255)
    industry: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    logo: Optional[str] = None


class FlaggedEmployerResponse(EmployerProfileResponse):
    job_count: int


class VerificationCreate(CamelModel):
    """Employer verification submission."""

    business_license: Optional[str] = Field(None, max_length=255)
    tax_id: Optional[str] = Field(None, max_length=100)
    verification_documents: List[str] = Field(default_factory=list)


class VerificationDecision(CamelModel):
    status: str


class VerificationResponse(CamelModel):
    """Verification request record."""

    id: UUID
    employer_id: UUID
    status: str
    business_license: Optional[str] = None
    tax_id: Optional[str] = None
    verification_documents: List[str] = Field(default_factory=list)
    submitted_at: datetime
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[UUID] = None


class VerificationDetail(VerificationResponse):
    employer_name: Optional[str] = None
    employer_email: Optional[str] = None
    company_name: Optional[str] = None

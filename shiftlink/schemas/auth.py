"""Authentication and user profile schemas."""

from __future__ import annotations  # Enable forward references

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import EmailStr, Field

from shiftlink.schemas.base import CamelModel


class RegisterRequest(CamelModel):
    """Register request schema."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, description="Password must be at least 8 characters")
    role: str = "student"
    country: Optional[str] = None
    company_name: Optional[str] = None


class LoginRequest(CamelModel):
    """Login request schema."""

    email: EmailStr
    password: str


class TokenResponse(CamelModel):
    """Tokens plus the authenticated user."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserResponse


class UserResponse(CamelModel):
    """User response schema."""

    id: UUID
    name: str
    email: str
    role: str
    country: Optional[str] = None
    language: Optional[str] = None
    image: Optional[str] = None
    is_active: bool
    student_id: Optional[UUID] = None
    employer_id: Optional[UUID] = None
    created_at: datetime


class StudentProfile(CamelModel):
    """Student-specific profile fields."""

    id: UUID
    bio: Optional[str] = None
    school: Optional[str] = None
    major: Optional[str] = None
    graduation_year: Optional[int] = None
    skills: List[str] = Field(default_factory=list)
    availability: Optional[str] = None
    resume: Optional[str] = None
    visa_type: Optional[str] = None
    work_hours_limit: Optional[int] = None


class EmployerProfile(CamelModel):
    """Employer-specific profile fields."""

    id: UUID
    company_name: str
    industry: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    logo: Optional[str] = None
    is_verified: bool


class UserDetailResponse(UserResponse):
    """User with its role profile."""

    student: Optional[StudentProfile] = None
    employer: Optional[EmployerProfile] = None


class UserUpdate(CamelModel):
    """Partial update of a user and its role profile."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=8)
    image: Optional[str] = None
    country: Optional[str] = None
    language: Optional[str] = None

    # Student fields
    bio: Optional[str] = None
    school: Optional[str] = None
    major: Optional[str] = None
    graduation_year: Optional[int] = None
    skills: Optional[List[str]] = None
    availability: Optional[str] = None
    resume: Optional[str] = None
    visa_type: Optional[str] = None
    work_hours_limit: Optional[int] = Field(None, ge=0)

    # Employer fields
    company_name: Optional[str] = None
    industry: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    logo: Optional[str] = None


# Rebuild models to resolve forward references
TokenResponse.model_rebuild()

"""Application schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from shiftlink.schemas.base import CamelModel
from shiftlink.schemas.review import ReviewResponse


class ApplicationCreate(CamelModel):
    """Apply to a job."""

    job_id: UUID
    notes: Optional[str] = Field(None, max_length=5000)


class ApplicationUpdate(CamelModel):
    """Employer/admin update: status decision and/or completion flag."""

    status: Optional[str] = None
    is_completed: Optional[bool] = None


class ApplicationResponse(CamelModel):
    """Application record."""

    id: UUID
    job_id: UUID
    student_id: UUID
    status: str
    notes: Optional[str] = None
    is_completed: bool
    completed_at: Optional[datetime] = None
    applied_at: datetime
    updated_at: Optional[datetime] = None


class ApplicationJobBrief(CamelModel):
    id: UUID
    title: str
    employer_id: UUID
    employer_name: Optional[str] = None


class ApplicationJobDetail(ApplicationJobBrief):
    location: str
    hourly_rate: float
    hours_per_week: int
    shift_times: Optional[str] = None
    is_verified: bool = False


class ApplicationStudentBrief(CamelModel):
    id: UUID
    name: str
    email: str


class ApplicationListBase(ApplicationResponse):
    """Fields shared by both listing shapes."""

    student_name: Optional[str] = None
    job_title: str


class ApplicationListItem(ApplicationListBase):
    """Regular listing entry with job and student sub-objects."""

    job: ApplicationJobBrief
    student: ApplicationStudentBrief
    has_review: bool


class CompletedApplicationItem(ApplicationListBase):
    """Completed-work listing entry."""

    has_employer_review: bool


class ApplicationDetail(ApplicationResponse):
    """Single application with related records."""

    job: ApplicationJobDetail
    student: ApplicationStudentBrief
    review: Optional[ReviewResponse] = None


class ApplicationCheckResponse(CamelModel):
    has_applied: bool
    application_id: Optional[UUID] = None

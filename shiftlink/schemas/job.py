"""Job schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from shiftlink.schemas.base import CamelModel


class JobCreate(CamelModel):
    """Job posting payload."""

    title: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    requirements: Optional[str] = None
    hourly_rate: float = Field(..., ge=0)
    hours_per_week: int = Field(..., ge=1, le=168)
    shift_times: Optional[str] = None
    is_premium: bool = False
    country: Optional[str] = None


class JobUpdate(CamelModel):
    """Partial job update."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    requirements: Optional[str] = None
    hourly_rate: Optional[float] = Field(None, ge=0)
    hours_per_week: Optional[int] = Field(None, ge=1, le=168)
    shift_times: Optional[str] = None
    is_premium: Optional[bool] = None
    is_active: Optional[bool] = None
    country: Optional[str] = None


class JobResponse(CamelModel):
    """Job as shown in listings and detail pages."""

    id: UUID
    title: str
    location: str
    description: str
    requirements: Optional[str] = None
    hourly_rate: float
    hours_per_week: int
    shift_times: Optional[str] = None
    is_premium: bool
    is_active: bool
    country: Optional[str] = None
    created_at: datetime
    employer_id: UUID
    employer_name: Optional[str] = None
    is_verified: bool = False
    applicants_count: int = 0


class JobListResponse(CamelModel):
    """Paginated job list."""

    jobs: List[JobResponse]
    total: int
    page: int
    size: int
    total_pages: int


class JobSearchHit(CamelModel):
    id: UUID
    title: str
    location: str
    hourly_rate: float
    employer_name: Optional[str] = None
    type: str = "job"


class EmployerSearchHit(CamelModel):
    id: UUID
    company_name: str
    industry: Optional[str] = None
    is_verified: bool
    type: str = "employer"


class SearchResponse(CamelModel):
    """Global search results; a section is omitted when not requested."""

    jobs: Optional[List[JobSearchHit]] = None
    employers: Optional[List[EmployerSearchHit]] = None

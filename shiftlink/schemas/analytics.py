"""Analytics schemas."""

import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from shiftlink.schemas.base import CamelModel


class AnalyticsRecord(CamelModel):
    """Counts pushed by an internal job."""

    new_students: int = Field(0, ge=0)
    new_employers: int = Field(0, ge=0)
    new_jobs: int = Field(0, ge=0)
    applications: int = Field(0, ge=0)
    completed_jobs: int = Field(0, ge=0)
    country: Optional[str] = "global"


class AnalyticsSnapshotResponse(AnalyticsRecord):
    id: UUID
    date: datetime.date
    country: str


class AnalyticsSummary(CamelModel):
    student_count: int
    employer_count: int
    job_count: int
    application_count: int
    completed_job_count: int


class CountryCount(CamelModel):
    country: Optional[str] = None
    count: int


class CategoryCount(CamelModel):
    category: str
    count: int


class AnalyticsResponse(CamelModel):
    """Admin dashboard payload."""

    time_series: List[AnalyticsSnapshotResponse]
    summary: AnalyticsSummary
    country_distribution: List[CountryCount]
    job_category_distribution: List[CategoryCount]


class SnapshotResult(CamelModel):
    success: bool = True
    records_created: int

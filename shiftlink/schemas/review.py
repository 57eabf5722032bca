"""Review schemas."""

from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import Field

from shiftlink.schemas.base import CamelModel


class ReviewCreate(CamelModel):
    """Submit one half of a review."""

    application_id: UUID
    type: Literal["student", "employer"]
    rating: float
    comment: Optional[str] = Field(None, max_length=5000)


class ReviewResponse(CamelModel):
    """Review row with both halves."""

    id: UUID
    application_id: UUID
    student_id: UUID
    employer_id: UUID
    student_rating: Optional[float] = None
    student_comment: Optional[str] = None
    student_reviewed_at: Optional[datetime] = None
    employer_rating: Optional[float] = None
    employer_comment: Optional[str] = None
    employer_reviewed_at: Optional[datetime] = None
    is_flagged: bool = False
    flag_reason: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class ReviewListItem(ReviewResponse):
    """Review with display names."""

    job_title: Optional[str] = None
    student_name: Optional[str] = None
    employer_name: Optional[str] = None


class SubjectReview(CamelModel):
    """One rating received by a student or employer."""

    id: UUID
    application_id: UUID
    job_title: Optional[str] = None
    reviewer_name: Optional[str] = None
    rating: float
    comment: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: datetime


class SubjectReviewsResponse(CamelModel):
    reviews: List[SubjectReview]
    average_rating: float

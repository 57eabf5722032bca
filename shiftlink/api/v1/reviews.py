"""Review endpoints."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shiftlink.api.deps import ActorContext, get_actor, get_db
from shiftlink.core.security import Role
from shiftlink.models.review import Review
from shiftlink.schemas.base import FlagRequest
from shiftlink.schemas.review import (
    ReviewCreate,
    ReviewListItem,
    ReviewResponse,
    SubjectReview,
    SubjectReviewsResponse,
)
from shiftlink.services.review_service import ReviewService

router = APIRouter()


def subject_reviews_response(reviews: List[Review], average: float, subject_role: Role) -> SubjectReviewsResponse:
    """Ratings received by a subject, shaped from the reviewer's half."""
    items = []
    for review in reviews:
        if subject_role == Role.EMPLOYER:
            rating, comment, reviewed_at = review.student_rating, review.student_comment, review.student_reviewed_at
            reviewer_name = review.student.user.name
        else:
            rating, comment, reviewed_at = review.employer_rating, review.employer_comment, review.employer_reviewed_at
            reviewer_name = review.employer.company_name
        items.append(
            SubjectReview(
                id=review.id,
                application_id=review.application_id,
                job_title=review.application.job.title,
                reviewer_name=reviewer_name,
                rating=rating,
                comment=comment,
                reviewed_at=reviewed_at,
                created_at=review.created_at,
            )
        )
    return SubjectReviewsResponse(reviews=items, average_rating=average)


@router.get("/reviews", response_model=List[ReviewListItem])
async def list_reviews(
    student_id: Optional[UUID] = Query(None, alias="studentId"),
    employer_id: Optional[UUID] = Query(None, alias="employerId"),
    application_id: Optional[UUID] = Query(None, alias="applicationId"),
    actor: ActorContext = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """List reviews visible to the caller, newest first."""
    reviews = await ReviewService(db).list(
        actor,
        student_id=student_id,
        employer_id=employer_id,
        application_id=application_id,
    )
    return [
        ReviewListItem(
            **ReviewResponse.model_validate(review).model_dump(),
            job_title=review.application.job.title,
            student_name=review.student.user.name,
            employer_name=review.employer.company_name,
        )
        for review in reviews
    ]


@router.post("/reviews", response_model=ReviewResponse)
async def submit_review(
    payload: ReviewCreate,
    actor: ActorContext = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """
    Submit or overwrite one half of a review.

    ``type=student`` is the student's review of the employer and
    ``type=employer`` the employer's review of the student.
    """
    return await ReviewService(db).submit(
        payload.application_id,
        payload.type,
        payload.rating,
        payload.comment,
        actor,
    )


@router.post("/reviews/{review_id}/flag", response_model=ReviewResponse)
async def flag_review(
    review_id: UUID,
    payload: FlagRequest,
    actor: ActorContext = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Flag a review for moderation."""
    return await ReviewService(db).flag(review_id, payload.reason, actor)


@router.get("/students/{student_id}/reviews", response_model=SubjectReviewsResponse)
async def get_student_reviews(
    student_id: UUID,
    actor: ActorContext = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Employer ratings received by a student, with the average."""
    reviews, average = await ReviewService(db).for_subject(student_id, Role.STUDENT, actor)
    return subject_reviews_response(reviews, average, Role.STUDENT)

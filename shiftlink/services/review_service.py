"""
Review submission and rating aggregation

A Review row belongs to exactly one completed application and has two
halves. The student half rates the employer; the employer half rates the
student. Each half is written only by its author and re-submitting a half
overwrites it.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Tuple
from uuid import UUID

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from shiftlink.config import settings
from shiftlink.core.exceptions import Forbidden, InvalidInput, InvalidState, NotFound
from shiftlink.core.security import ActorContext, Role
from shiftlink.db.base import utcnow
from shiftlink.models.application import Application
from shiftlink.models.employer import Employer
from shiftlink.models.review import Review
from shiftlink.models.student import Student

logger = structlog.get_logger(__name__)

REVIEW_TYPES = ("student", "employer")


def round_rating(value: Optional[float]) -> float:
    """Round a mean rating half-up to one decimal; no ratings gives 0.0."""
    if value is None:
        return 0.0
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def validate_rating(rating: float) -> float:
    if not settings.MIN_RATING <= rating <= settings.MAX_RATING:
        raise InvalidInput(
            f"Rating must be between {settings.MIN_RATING:g} and {settings.MAX_RATING:g}"
        )
    return float(rating)


def _apply_half(review: Review, review_type: str, rating: float, comment: Optional[str], when: datetime) -> None:
    if review_type == "student":
        review.student_rating = rating
        review.student_comment = comment
        review.student_reviewed_at = when
    else:
        review.employer_rating = rating
        review.employer_comment = comment
        review.employer_reviewed_at = when


def _rating_column(subject_role: Role):
    """The half that rates the subject, and the column identifying the subject."""
    if subject_role == Role.STUDENT:
        return Review.employer_rating, Review.student_id
    if subject_role == Role.EMPLOYER:
        return Review.student_rating, Review.employer_id
    raise InvalidInput(f"Reviews are not kept for role {subject_role}")


class ReviewService:
    """Write review halves and read ratings."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _find_by_application(self, application_id: UUID) -> Optional[Review]:
        result = await self.db.execute(select(Review).where(Review.application_id == application_id))
        return result.scalar_one_or_none()

    async def submit(
        self,
        application_id: UUID,
        review_type: str,
        rating: float,
        comment: Optional[str],
        actor: ActorContext,
    ) -> Review:
        """Create the review row or update the caller's half of it."""
        if review_type not in REVIEW_TYPES:
            raise InvalidInput("Review type must be 'student' or 'employer'")

        result = await self.db.execute(
            select(Application)
            .options(selectinload(Application.job))
            .where(Application.id == application_id)
        )
        application = result.scalar_one_or_none()
        if application is None:
            raise NotFound("Application not found")

        if not application.is_completed:
            raise InvalidState("Only completed applications can be reviewed")

        if review_type == "student":
            is_author = actor.owns_student(application.student_id)
        else:
            is_author = actor.owns_employer(application.job.employer_id)
        if not is_author:
            raise Forbidden("You don't have permission to submit this review")

        rating = validate_rating(rating)
        now = utcnow()

        review = await self._find_by_application(application_id)
        if review is None:
            review = Review(
                application_id=application_id,
                student_id=application.student_id,
                employer_id=application.job.employer_id,
            )
            _apply_half(review, review_type, rating, comment, now)
            self.db.add(review)
            try:
                await self.db.commit()
            except IntegrityError:
                # The other party created the row first: write our half onto theirs
                await self.db.rollback()
                review = await self._find_by_application(application_id)
                if review is None:
                    raise
                _apply_half(review, review_type, rating, comment, now)
                await self.db.commit()
        else:
            _apply_half(review, review_type, rating, comment, now)
            await self.db.commit()

        await self.db.refresh(review)
        logger.info(
            "review_submitted",
            review_id=str(review.id),
            application_id=str(application_id),
            type=review_type,
            rating=rating,
        )
        return review

    async def get_average_rating(self, subject_id: UUID, subject_role: Role) -> float:
        """Mean rating received by a student or employer, one decimal."""
        rating_column, subject_column = _rating_column(subject_role)
        result = await self.db.execute(
            select(func.avg(rating_column)).where(
                subject_column == subject_id,
                rating_column.isnot(None),
            )
        )
        return round_rating(result.scalar())

    async def list(
        self,
        actor: ActorContext,
        student_id: Optional[UUID] = None,
        employer_id: Optional[UUID] = None,
        application_id: Optional[UUID] = None,
    ) -> List[Review]:
        """
        Reviews visible to the caller, newest first.

        Admins read everything; students and employers only read reviews of
        their own applications.
        """
        query = select(Review).options(
            selectinload(Review.application).selectinload(Application.job),
            selectinload(Review.student).selectinload(Student.user),
            selectinload(Review.employer).selectinload(Employer.user),
        )

        if actor.role == Role.STUDENT:
            query = query.where(Review.student_id == actor.student_id)
        elif actor.role == Role.EMPLOYER:
            query = query.where(Review.employer_id == actor.employer_id)

        if student_id:
            query = query.where(Review.student_id == student_id)
        if employer_id:
            query = query.where(Review.employer_id == employer_id)
        if application_id:
            query = query.where(Review.application_id == application_id)

        result = await self.db.execute(query.order_by(Review.created_at.desc()))
        return list(result.scalars().all())

    async def for_subject(
        self, subject_id: UUID, subject_role: Role, actor: ActorContext
    ) -> Tuple[List[Review], float]:
        """Ratings received by one student or employer, with their average."""
        if subject_role == Role.EMPLOYER:
            subject = await self.db.get(Employer, subject_id)
            reviewed_at = Review.student_reviewed_at
        else:
            subject = await self.db.get(Student, subject_id)
            reviewed_at = Review.employer_reviewed_at

        if subject is None:
            raise NotFound(f"{subject_role.value.capitalize()} not found")

        if not actor.is_admin and actor.id != subject.user_id:
            raise Forbidden("You don't have permission to view these reviews")

        rating_column, subject_column = _rating_column(subject_role)
        result = await self.db.execute(
            select(Review)
            .options(
                selectinload(Review.application).selectinload(Application.job),
                selectinload(Review.student).selectinload(Student.user),
                selectinload(Review.employer).selectinload(Employer.user),
            )
            .where(subject_column == subject_id, rating_column.isnot(None))
            .order_by(reviewed_at.desc())
        )
        reviews = list(result.scalars().all())
        average = await self.get_average_rating(subject_id, subject_role)
        return reviews, average

    async def flag(self, review_id: UUID, reason: str, actor: ActorContext) -> Review:
        """Mark a review for moderation."""
        review = await self.db.get(Review, review_id)
        if review is None:
            raise NotFound("Review not found")

        review.is_flagged = True
        review.flag_reason = reason
        await self.db.commit()
        await self.db.refresh(review)

        logger.info("review_flagged", review_id=str(review_id), flagged_by=str(actor.id))
        return review

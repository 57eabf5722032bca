"""
Application lifecycle

States and the transitions exposed to callers:

    (none)   --apply-->     PENDING
    PENDING  --approve-->   APPROVED
    PENDING  --reject-->    REJECTED
    APPROVED --complete-->  APPROVED (is_completed=True)
    APPROVED --uncomplete-> APPROVED (is_completed=False)

Status decisions and the completion flag belong to the employer owning the
job (or an admin). Reopening a decided application is not supported.
"""

from enum import Enum
from typing import List, Optional
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from shiftlink.core.exceptions import (
    DuplicateApplication,
    Forbidden,
    InvalidInput,
    InvalidTransition,
    NotFound,
)
from shiftlink.core.security import ActorContext, Role
from shiftlink.db.base import utcnow
from shiftlink.models.application import Application
from shiftlink.models.employer import Employer
from shiftlink.models.job import Job
from shiftlink.models.student import Student

logger = structlog.get_logger(__name__)


class ApplicationStatus(str, Enum):
    """Application decision states."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


ALLOWED_TRANSITIONS = {
    ApplicationStatus.PENDING: {ApplicationStatus.APPROVED, ApplicationStatus.REJECTED},
    ApplicationStatus.APPROVED: set(),
    ApplicationStatus.REJECTED: set(),
}


def parse_status(value: str) -> ApplicationStatus:
    """Normalise a status string (case-insensitive)."""
    try:
        return ApplicationStatus(value.strip().upper())
    except ValueError:
        raise InvalidInput(f"Invalid status: {value}")


def parse_decision(value: str) -> ApplicationStatus:
    """Parse a status an employer may set: APPROVED or REJECTED."""
    decision = parse_status(value)
    if decision == ApplicationStatus.PENDING:
        raise InvalidInput("Invalid status. Must be APPROVED or REJECTED.")
    return decision


class ApplicationService:
    """Create, decide, complete, list and delete job applications."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get(self, application_id: UUID, detailed: bool = False) -> Application:
        query = select(Application).where(Application.id == application_id)
        if detailed:
            query = query.options(
                selectinload(Application.job).selectinload(Job.employer).selectinload(Employer.user),
                selectinload(Application.student).selectinload(Student.user),
                selectinload(Application.review),
            )
        else:
            query = query.options(selectinload(Application.job))

        result = await self.db.execute(query)
        application = result.scalar_one_or_none()
        if application is None:
            raise NotFound("Application not found")
        return application

    @staticmethod
    def _can_manage(actor: ActorContext, application: Application) -> bool:
        return actor.is_admin or actor.owns_employer(application.job.employer_id)

    async def submit(self, job_id: UUID, actor: ActorContext, notes: Optional[str] = None) -> Application:
        """Apply to a job as the calling student."""
        if actor.role != Role.STUDENT or actor.student_id is None:
            raise Forbidden("Only students can apply for jobs")

        job = await self.db.get(Job, job_id)
        if job is None:
            raise NotFound("Job not found")

        result = await self.db.execute(
            select(Application.id).where(
                Application.job_id == job_id,
                Application.student_id == actor.student_id,
            )
        )
        if result.scalar_one_or_none() is not None:
            raise DuplicateApplication()

        application = Application(
            job_id=job_id,
            student_id=actor.student_id,
            notes=notes,
            status=ApplicationStatus.PENDING.value,
            is_completed=False,
        )
        self.db.add(application)

        # The unique (job_id, student_id) constraint catches concurrent submissions
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise DuplicateApplication()

        await self.db.refresh(application)
        logger.info(
            "application_submitted",
            application_id=str(application.id),
            job_id=str(job_id),
            student_id=str(actor.student_id),
        )
        return application

    async def update(
        self,
        application_id: UUID,
        actor: ActorContext,
        status: Optional[str] = None,
        is_completed: Optional[bool] = None,
    ) -> Application:
        """
        Apply a status decision and/or completion change.

        Every check runs against the state at request time; both changes are
        written in one commit or not at all.
        """
        application = await self._get(application_id)

        if not self._can_manage(actor, application):
            raise Forbidden("You can only update applications for your own jobs")

        if status is None and is_completed is None:
            raise InvalidInput("Nothing to update. Provide status and/or isCompleted.")

        current = ApplicationStatus(application.status)
        new_status = None
        if status is not None:
            new_status = parse_decision(status)
            if new_status != current and new_status not in ALLOWED_TRANSITIONS[current]:
                raise InvalidTransition(
                    f"Cannot change status from {current.value} to {new_status.value}"
                )

        if is_completed and current != ApplicationStatus.APPROVED:
            raise InvalidTransition("Only approved applications can be marked as completed")

        if new_status is not None:
            application.status = new_status.value

        if is_completed is not None:
            if is_completed and not application.is_completed:
                application.completed_at = utcnow()
            elif not is_completed:
                application.completed_at = None
            application.is_completed = is_completed

        await self.db.commit()
        await self.db.refresh(application)

        logger.info(
            "application_updated",
            application_id=str(application.id),
            status=application.status,
            is_completed=application.is_completed,
            actor_id=str(actor.id),
        )
        return application

    async def set_status(self, application_id: UUID, new_status: str, actor: ActorContext) -> Application:
        """Approve or reject a pending application."""
        return await self.update(application_id, actor, status=new_status)

    async def mark_completed(self, application_id: UUID, is_completed: bool, actor: ActorContext) -> Application:
        """Set or clear the completion flag of an approved application."""
        return await self.update(application_id, actor, is_completed=is_completed)

    async def delete(self, application_id: UUID, actor: ActorContext) -> None:
        """Delete an application as the applying student or the owning employer."""
        application = await self._get(application_id)

        if not (
            actor.owns_student(application.student_id)
            or actor.owns_employer(application.job.employer_id)
        ):
            raise Forbidden("You don't have permission to delete this application")

        await self.db.delete(application)
        await self.db.commit()
        logger.info("application_deleted", application_id=str(application_id), actor_id=str(actor.id))

    async def get(self, application_id: UUID, actor: ActorContext) -> Application:
        """Fetch one application with job, student and review loaded."""
        application = await self._get(application_id, detailed=True)

        if not (
            actor.is_admin
            or actor.owns_student(application.student_id)
            or actor.owns_employer(application.job.employer_id)
        ):
            raise Forbidden("You don't have permission to view this application")

        return application

    async def list(
        self,
        actor: ActorContext,
        job_id: Optional[UUID] = None,
        student_id: Optional[UUID] = None,
        employer_id: Optional[UUID] = None,
        status: Optional[str] = None,
        is_completed: Optional[bool] = None,
    ) -> List[Application]:
        """
        Role-scoped application listing, newest first.

        Students only see their own applications; employers only see
        applications to jobs they own (one join on jobs); admins see all.
        """
        query = (
            select(Application)
            .join(Job, Application.job_id == Job.id)
            .options(
                selectinload(Application.job).selectinload(Job.employer).selectinload(Employer.user),
                selectinload(Application.student).selectinload(Student.user),
                selectinload(Application.review),
            )
        )

        if actor.role == Role.STUDENT:
            if actor.student_id is None:
                return []
            query = query.where(Application.student_id == actor.student_id)
        elif actor.role == Role.EMPLOYER:
            if actor.employer_id is None or (employer_id and employer_id != actor.employer_id):
                return []
            query = query.where(Job.employer_id == actor.employer_id)
        elif employer_id:
            query = query.where(Job.employer_id == employer_id)

        if student_id and actor.role != Role.STUDENT:
            query = query.where(Application.student_id == student_id)

        if job_id:
            query = query.where(Application.job_id == job_id)

        if status:
            query = query.where(Application.status == parse_status(status).value)

        if is_completed is not None:
            query = query.where(Application.is_completed.is_(is_completed))

        query = query.order_by(Application.applied_at.desc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def find_for_student(self, job_id: UUID, actor: ActorContext) -> Optional[Application]:
        """Return the caller's application to a job, if any."""
        if actor.student_id is None:
            return None
        result = await self.db.execute(
            select(Application).where(
                Application.job_id == job_id,
                Application.student_id == actor.student_id,
            )
        )
        return result.scalar_one_or_none()

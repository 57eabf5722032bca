"""
Employer moderation and verification

Flagging is open to any authenticated user while unflagging and
verification decisions are admin-only. Approving a verification request
also marks the employer verified in the same transaction.
"""

from typing import List, Optional, Tuple
from uuid import UUID

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from shiftlink.core.exceptions import Conflict, Forbidden, InvalidInput, InvalidState, NotFound
from shiftlink.core.security import ActorContext
from shiftlink.db.base import utcnow
from shiftlink.models.application import Application
from shiftlink.models.employer import Employer
from shiftlink.models.job import Job
from shiftlink.models.verification_request import VerificationRequest

logger = structlog.get_logger(__name__)

VERIFICATION_DECISIONS = ("APPROVED", "REJECTED")


class EmployerService:
    """Employer profile, stats and flagging."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, employer_id: UUID) -> Employer:
        result = await self.db.execute(
            select(Employer).options(selectinload(Employer.user)).where(Employer.id == employer_id)
        )
        employer = result.scalar_one_or_none()
        if employer is None:
            raise NotFound("Employer not found")
        return employer

    async def get_stats(self, employer_id: UUID) -> Tuple[int, int]:
        """Total jobs and total applications received, in one query."""
        result = await self.db.execute(
            select(func.count(Job.id.distinct()), func.count(Application.id))
            .select_from(Job)
            .outerjoin(Application, Application.job_id == Job.id)
            .where(Job.employer_id == employer_id)
        )
        total_jobs, total_applications = result.one()
        return total_jobs or 0, total_applications or 0

    async def update_profile(self, employer_id: UUID, fields: dict, actor: ActorContext) -> Employer:
        employer = await self.get(employer_id)
        if employer.user_id != actor.id:
            raise Forbidden("Unauthorized to update this profile")

        for field, value in fields.items():
            setattr(employer, field, value)

        await self.db.commit()
        return await self.get(employer_id)

    async def flag(self, employer_id: UUID, reason: str, actor: ActorContext) -> Employer:
        """Flag an employer; open to any authenticated user."""
        employer = await self.get(employer_id)
        employer.is_flagged = True
        employer.flag_reason = reason
        await self.db.commit()

        logger.info("employer_flagged", employer_id=str(employer_id), flagged_by=str(actor.id))
        return employer

    async def unflag(self, employer_id: UUID, actor: ActorContext) -> Employer:
        """Clear a flag; admin only."""
        if not actor.is_admin:
            raise Forbidden("Only admins can unflag employers")

        employer = await self.get(employer_id)
        employer.is_flagged = False
        employer.flag_reason = None
        await self.db.commit()

        logger.info("employer_unflagged", employer_id=str(employer_id), admin_id=str(actor.id))
        return employer

    async def list_flagged(self) -> List[Tuple[Employer, int]]:
        """Flagged employers with their job counts, newest accounts first."""
        job_counts = (
            select(Job.employer_id, func.count(Job.id).label("job_count"))
            .group_by(Job.employer_id)
            .subquery()
        )
        result = await self.db.execute(
            select(Employer, func.coalesce(job_counts.c.job_count, 0))
            .options(selectinload(Employer.user))
            .outerjoin(job_counts, job_counts.c.employer_id == Employer.id)
            .where(Employer.is_flagged.is_(True))
            .order_by(Employer.created_at.desc())
        )
        return [(employer, count) for employer, count in result.all()]


class VerificationService:
    """Employer verification requests."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get(self, request_id: UUID) -> VerificationRequest:
        result = await self.db.execute(
            select(VerificationRequest)
            .options(selectinload(VerificationRequest.employer).selectinload(Employer.user))
            .where(VerificationRequest.id == request_id)
        )
        request = result.scalar_one_or_none()
        if request is None:
            raise NotFound("Verification request not found")
        return request

    async def submit(
        self,
        actor: ActorContext,
        business_license: Optional[str] = None,
        tax_id: Optional[str] = None,
        verification_documents: Optional[List[str]] = None,
    ) -> VerificationRequest:
        """Open a verification request; one pending request per employer."""
        if actor.employer_id is None:
            raise Forbidden("Only employers can submit verification requests")

        employer = await self.db.get(Employer, actor.employer_id)
        if employer is None:
            raise NotFound("Employer not found")
        if employer.is_verified:
            raise InvalidState("Employer is already verified")

        result = await self.db.execute(
            select(VerificationRequest.id).where(
                VerificationRequest.employer_id == actor.employer_id,
                VerificationRequest.status == "PENDING",
            )
        )
        if result.scalar_one_or_none() is not None:
            raise Conflict("You already have a verification request. Please wait for it to be processed.")

        request = VerificationRequest(
            employer_id=actor.employer_id,
            status="PENDING",
            business_license=business_license,
            tax_id=tax_id,
            verification_documents=verification_documents or [],
        )
        self.db.add(request)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise Conflict("You already have a verification request. Please wait for it to be processed.")

        logger.info("verification_submitted", request_id=str(request.id), employer_id=str(actor.employer_id))
        return await self._get(request.id)

    async def list(self, status: Optional[str] = None) -> List[VerificationRequest]:
        query = select(VerificationRequest).options(
            selectinload(VerificationRequest.employer).selectinload(Employer.user)
        )
        if status:
            query = query.where(VerificationRequest.status == status.upper())
        result = await self.db.execute(query.order_by(VerificationRequest.submitted_at.desc()))
        return list(result.scalars().all())

    async def get(self, request_id: UUID, actor: ActorContext) -> VerificationRequest:
        request = await self._get(request_id)
        if not (actor.is_admin or actor.owns_employer(request.employer_id)):
            raise Forbidden("You don't have permission to view this verification request")
        return request

    async def review(self, request_id: UUID, status: str, actor: ActorContext) -> VerificationRequest:
        """Approve or reject a pending request (admin only)."""
        if not actor.is_admin:
            raise Forbidden("Only admins can update verification requests")

        decision = (status or "").strip().upper()
        if decision not in VERIFICATION_DECISIONS:
            raise InvalidInput("Invalid status. Must be APPROVED or REJECTED.")

        request = await self._get(request_id)
        if request.status != "PENDING":
            raise InvalidState(f"Verification request was already {request.status.lower()}")

        request.status = decision
        request.reviewed_at = utcnow()
        request.reviewed_by = actor.id
        if decision == "APPROVED":
            request.employer.is_verified = True

        # Request and employer are written in the same transaction
        await self.db.commit()

        logger.info(
            "verification_reviewed",
            request_id=str(request_id),
            employer_id=str(request.employer_id),
            status=decision,
            admin_id=str(actor.id),
        )
        return request

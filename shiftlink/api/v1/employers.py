"""Employer profile and moderation endpoints."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shiftlink.api.deps import ActorContext, get_actor, get_db, require_admin
from shiftlink.api.v1.reviews import subject_reviews_response
from shiftlink.core.security import Role
from shiftlink.models.employer import Employer
from shiftlink.schemas.base import FlagRequest
from shiftlink.schemas.employer import (
    EmployerProfileResponse,
    EmployerStatsResponse,
    EmployerUpdate,
    FlaggedEmployerResponse,
)
from shiftlink.schemas.review import SubjectReviewsResponse
from shiftlink.services.employer_service import EmployerService
from shiftlink.services.review_service import ReviewService

router = APIRouter()


def _profile(employer: Employer) -> EmployerProfileResponse:
    return EmployerProfileResponse(
        id=employer.id,
        user_id=employer.user_id,
        name=employer.user.name,
        email=employer.user.email,
        company_name=employer.company_name,
        industry=employer.industry,
        website=employer.website,
        description=employer.description,
        logo=employer.logo,
        is_verified=employer.is_verified,
        is_flagged=employer.is_flagged,
        flag_reason=employer.flag_reason,
        created_at=employer.created_at,
    )


# Declared before /{employer_id} so "flagged" is not parsed as an id
@router.get("/flagged", response_model=List[FlaggedEmployerResponse])
async def list_flagged_employers(
    actor: ActorContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Flagged employers with their job counts (admin only)."""
    flagged = await EmployerService(db).list_flagged()
    return [
        FlaggedEmployerResponse(**_profile(employer).model_dump(), job_count=job_count)
        for employer, job_count in flagged
    ]


@router.get("/{employer_id}", response_model=EmployerStatsResponse)
async def get_employer(
    employer_id: UUID,
    actor: ActorContext = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Employer profile with job and application totals."""
    service = EmployerService(db)
    employer = await service.get(employer_id)
    total_jobs, total_applications = await service.get_stats(employer_id)
    return EmployerStatsResponse(
        profile=_profile(employer),
        total_jobs=total_jobs,
        total_applications=total_applications,
    )


@router.patch("/{employer_id}", response_model=EmployerProfileResponse)
async def update_employer(
    employer_id: UUID,
    payload: EmployerUpdate,
    actor: ActorContext = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Update the caller's own company profile."""
    fields = payload.model_dump(exclude_unset=True, exclude_none=True)
    employer = await EmployerService(db).update_profile(employer_id, fields, actor)
    return _profile(employer)


@router.post("/{employer_id}/flag", response_model=EmployerProfileResponse)
async def flag_employer(
    employer_id: UUID,
    payload: FlagRequest,
    actor: ActorContext = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Flag an employer for moderation."""
    return _profile(await EmployerService(db).flag(employer_id, payload.reason, actor))


@router.delete("/{employer_id}/flag", response_model=EmployerProfileResponse)
async def unflag_employer(
    employer_id: UUID,
    actor: ActorContext = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Clear an employer's flag (admin only)."""
    return _profile(await EmployerService(db).unflag(employer_id, actor))


@router.get("/{employer_id}/reviews", response_model=SubjectReviewsResponse)
async def get_employer_reviews(
    employer_id: UUID,
    actor: ActorContext = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Student ratings received by an employer, with the average."""
    reviews, average = await ReviewService(db).for_subject(employer_id, Role.EMPLOYER, actor)
    return subject_reviews_response(reviews, average, Role.EMPLOYER)

"""Job endpoints - browse, post and manage part-time jobs."""

import math
from typing import Optional
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from shiftlink.api.deps import (
    ActorContext,
    get_actor,
    get_actor_optional,
    get_db,
    require_employer,
)
from shiftlink.config import settings
from shiftlink.core.exceptions import Forbidden, NotFound
from shiftlink.models.application import Application
from shiftlink.models.employer import Employer
from shiftlink.models.job import Job
from shiftlink.schemas.base import SuccessResponse
from shiftlink.schemas.job import JobCreate, JobListResponse, JobResponse, JobUpdate

logger = structlog.get_logger(__name__)

router = APIRouter()


def _applicant_counts():
    return (
        select(Application.job_id, func.count(Application.id).label("applicants_count"))
        .group_by(Application.job_id)
        .subquery()
    )


def _job_response(job: Job, applicants_count: int = 0) -> JobResponse:
    employer = job.employer
    return JobResponse(
        id=job.id,
        title=job.title,
        location=job.location,
        description=job.description,
        requirements=job.requirements,
        hourly_rate=job.hourly_rate,
        hours_per_week=job.hours_per_week,
        shift_times=job.shift_times,
        is_premium=job.is_premium,
        is_active=job.is_active,
        country=job.country,
        created_at=job.created_at,
        employer_id=job.employer_id,
        employer_name=employer.company_name if employer else None,
        is_verified=employer.is_verified if employer else False,
        applicants_count=applicants_count or 0,
    )


async def _get_job(db: AsyncSession, job_id: UUID) -> Job:
    result = await db.execute(
        select(Job).options(selectinload(Job.employer)).where(Job.id == job_id)
    )
    job = result.scalar_one_or_none()
    if job is None:
        raise NotFound("Job not found")
    return job


async def _count_applicants(db: AsyncSession, job_id: UUID) -> int:
    result = await db.execute(select(func.count(Application.id)).where(Application.job_id == job_id))
    return result.scalar() or 0


def _check_owner(job: Job, actor: ActorContext) -> None:
    if not (actor.is_admin or actor.owns_employer(job.employer_id)):
        raise Forbidden("You can only manage your own jobs")


@router.get("", response_model=JobListResponse)
async def list_jobs(
    search: Optional[str] = Query(None, description="Match title or description"),
    location: Optional[str] = Query(None, description="Partial, case-insensitive"),
    min_wage: Optional[float] = Query(None, alias="minWage", ge=0),
    max_hours: Optional[int] = Query(None, alias="maxHours", ge=0),
    country: Optional[str] = None,
    employer_id: Optional[UUID] = Query(None, alias="employerId"),
    page: int = Query(1, ge=1),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    actor: Optional[ActorContext] = Depends(get_actor_optional),
    db: AsyncSession = Depends(get_db),
):
    """
    Paginated job list, newest first.

    Only active jobs are listed, except when an employer filters by their own
    employerId (their dashboard shows inactive postings too).
    """
    filters = []

    own_listing = actor is not None and employer_id is not None and actor.owns_employer(employer_id)
    if not own_listing:
        filters.append(Job.is_active.is_(True))

    if search:
        pattern = f"%{search}%"
        filters.append(or_(Job.title.ilike(pattern), Job.description.ilike(pattern)))
    if location:
        filters.append(Job.location.ilike(f"%{location}%"))
    if min_wage is not None:
        filters.append(Job.hourly_rate >= min_wage)
    if max_hours is not None:
        filters.append(Job.hours_per_week <= max_hours)
    if country:
        filters.append(Job.country == country)
    if employer_id:
        filters.append(Job.employer_id == employer_id)

    count_result = await db.execute(select(func.count(Job.id)).where(*filters))
    total = count_result.scalar() or 0

    counts = _applicant_counts()
    result = await db.execute(
        select(Job, func.coalesce(counts.c.applicants_count, 0))
        .options(selectinload(Job.employer))
        .outerjoin(counts, counts.c.job_id == Job.id)
        .where(*filters)
        .order_by(Job.created_at.desc())
        .offset((page - 1) * size)
        .limit(size)
    )

    return JobListResponse(
        jobs=[_job_response(job, count) for job, count in result.all()],
        total=total,
        page=page,
        size=size,
        total_pages=math.ceil(total / size) if total else 0,
    )


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: UUID,
    actor: ActorContext = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Get job details."""
    job = await _get_job(db, job_id)
    return _job_response(job, await _count_applicants(db, job_id))


@router.post("", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
async def create_job(
    payload: JobCreate,
    actor: ActorContext = Depends(require_employer),
    db: AsyncSession = Depends(get_db),
):
    """Post a job as the calling employer."""
    result = await db.execute(
        select(Employer).options(selectinload(Employer.user)).where(Employer.id == actor.employer_id)
    )
    employer = result.scalar_one_or_none()
    if employer is None:
        raise Forbidden("Employer profile not found")

    data = payload.model_dump()
    data["country"] = data.get("country") or employer.user.country or "Unknown"

    job = Job(employer_id=employer.id, is_active=True, **data)
    job.employer = employer
    db.add(job)
    await db.commit()

    logger.info("job_created", job_id=str(job.id), employer_id=str(employer.id))
    return _job_response(job)


@router.put("/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: UUID,
    payload: JobUpdate,
    actor: ActorContext = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Update a job (owning employer or admin)."""
    job = await _get_job(db, job_id)
    _check_owner(job, actor)

    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(job, field, value)

    await db.commit()
    logger.info("job_updated", job_id=str(job_id), actor_id=str(actor.id))
    return _job_response(job, await _count_applicants(db, job_id))


@router.delete("/{job_id}", response_model=SuccessResponse)
async def delete_job(
    job_id: UUID,
    actor: ActorContext = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Delete a job and its applications (owning employer or admin)."""
    job = await _get_job(db, job_id)
    _check_owner(job, actor)

    await db.delete(job)
    await db.commit()

    logger.info("job_deleted", job_id=str(job_id), actor_id=str(actor.id))
    return SuccessResponse()

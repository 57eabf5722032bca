"""Global search over jobs and employers."""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from shiftlink.api.deps import get_db
from shiftlink.core.exceptions import InvalidInput
from shiftlink.models.employer import Employer
from shiftlink.models.job import Job
from shiftlink.schemas.job import EmployerSearchHit, JobSearchHit, SearchResponse

router = APIRouter()


@router.get("", response_model=SearchResponse, response_model_exclude_none=True)
async def search(
    q: Optional[str] = Query(None, description="Search text"),
    type: Literal["all", "jobs", "employers"] = Query("all"),
    limit: int = Query(10, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
):
    """Case-insensitive search of active jobs and employers."""
    if not q or not q.strip():
        raise InvalidInput("Search query is required")

    pattern = f"%{q.strip()}%"
    response = SearchResponse()

    if type in ("all", "jobs"):
        result = await db.execute(
            select(Job)
            .options(selectinload(Job.employer))
            .where(
                Job.is_active.is_(True),
                or_(
                    Job.title.ilike(pattern),
                    Job.description.ilike(pattern),
                    Job.location.ilike(pattern),
                ),
            )
            .order_by(Job.created_at.desc())
            .limit(limit)
        )
        response.jobs = [
            JobSearchHit(
                id=job.id,
                title=job.title,
                location=job.location,
                hourly_rate=job.hourly_rate,
                employer_name=job.employer.company_name if job.employer else None,
            )
            for job in result.scalars().all()
        ]

    if type in ("all", "employers"):
        result = await db.execute(
            select(Employer)
            .where(or_(Employer.company_name.ilike(pattern), Employer.industry.ilike(pattern)))
            .order_by(Employer.company_name.asc())
            .limit(limit)
        )
        response.employers = [EmployerSearchHit.model_validate(e) for e in result.scalars().all()]

    return response

"""Job application endpoints."""

from typing import List, Optional, Union
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shiftlink.api.deps import ActorContext, get_actor, get_db, require_student
from shiftlink.models.application import Application
from shiftlink.schemas.application import (
    ApplicationCheckResponse,
    ApplicationCreate,
    ApplicationDetail,
    ApplicationJobBrief,
    ApplicationJobDetail,
    ApplicationListItem,
    ApplicationResponse,
    ApplicationStudentBrief,
    ApplicationUpdate,
    CompletedApplicationItem,
)
from shiftlink.schemas.base import SuccessResponse
from shiftlink.schemas.review import ReviewResponse
from shiftlink.services.application_service import ApplicationService

router = APIRouter()


def _student_brief(application: Application) -> ApplicationStudentBrief:
    user = application.student.user
    return ApplicationStudentBrief(id=application.student_id, name=user.name, email=user.email)


def _list_item(
    application: Application, completed_view: bool
) -> Union[ApplicationListItem, CompletedApplicationItem]:
    base = ApplicationResponse.model_validate(application).model_dump()
    job = application.job
    review = application.review
    shared = dict(base, student_name=application.student.user.name, job_title=job.title)

    if completed_view:
        return CompletedApplicationItem(
            **shared,
            has_employer_review=review is not None and review.employer_rating is not None,
        )
    return ApplicationListItem(
        **shared,
        job=ApplicationJobBrief(
            id=job.id,
            title=job.title,
            employer_id=job.employer_id,
            employer_name=job.employer.company_name,
        ),
        student=_student_brief(application),
        has_review=review is not None,
    )


@router.post("", response_model=ApplicationResponse)
async def create_application(
    payload: ApplicationCreate,
    actor: ActorContext = Depends(require_student),
    db: AsyncSession = Depends(get_db),
):
    """Apply to a job as the calling student."""
    application = await ApplicationService(db).submit(payload.job_id, actor, payload.notes)
    return application


@router.get("", response_model=List[Union[ApplicationListItem, CompletedApplicationItem]])
async def list_applications(
    job_id: Optional[UUID] = Query(None, alias="jobId"),
    student_id: Optional[UUID] = Query(None, alias="studentId"),
    employer_id: Optional[UUID] = Query(None, alias="employerId"),
    status_filter: Optional[str] = Query(None, alias="status"),
    is_completed: Optional[bool] = Query(None, alias="isCompleted"),
    actor: ActorContext = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """
    List applications visible to the caller.

    With ``isCompleted=true`` items report ``hasEmployerReview``; otherwise
    they include ``job``/``student`` sub-objects and ``hasReview``.
    """
    applications = await ApplicationService(db).list(
        actor,
        job_id=job_id,
        student_id=student_id,
        employer_id=employer_id,
        status=status_filter,
        is_completed=is_completed,
    )
    completed_view = is_completed is True
    return [_list_item(application, completed_view) for application in applications]


@router.get("/check", response_model=ApplicationCheckResponse)
async def check_application(
    job_id: UUID = Query(..., alias="jobId"),
    actor: ActorContext = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Whether the calling student already applied to a job."""
    application = await ApplicationService(db).find_for_student(job_id, actor)
    return ApplicationCheckResponse(
        has_applied=application is not None,
        application_id=application.id if application else None,
    )


@router.get("/{application_id}", response_model=ApplicationDetail)
async def get_application(
    application_id: UUID,
    actor: ActorContext = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Get one application with its job, student and review."""
    application = await ApplicationService(db).get(application_id, actor)
    job = application.job
    base = ApplicationResponse.model_validate(application).model_dump()

    return ApplicationDetail(
        **base,
        job=ApplicationJobDetail(
            id=job.id,
            title=job.title,
            employer_id=job.employer_id,
            employer_name=job.employer.company_name,
            location=job.location,
            hourly_rate=job.hourly_rate,
            hours_per_week=job.hours_per_week,
            shift_times=job.shift_times,
            is_verified=job.employer.is_verified,
        ),
        student=_student_brief(application),
        review=ReviewResponse.model_validate(application.review) if application.review else None,
    )


@router.patch("/{application_id}", response_model=ApplicationResponse)
async def update_application(
    application_id: UUID,
    payload: ApplicationUpdate,
    actor: ActorContext = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Approve/reject and/or mark completion (owning employer or admin)."""
    return await ApplicationService(db).update(
        application_id,
        actor,
        status=payload.status,
        is_completed=payload.is_completed,
    )


@router.delete("/{application_id}", response_model=SuccessResponse)
async def delete_application(
    application_id: UUID,
    actor: ActorContext = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Withdraw (student) or remove (owning employer) an application."""
    await ApplicationService(db).delete(application_id, actor)
    return SuccessResponse()

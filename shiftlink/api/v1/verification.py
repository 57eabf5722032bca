"""Employer verification endpoints."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from shiftlink.api.deps import ActorContext, get_actor, get_db, require_admin, require_employer
from shiftlink.models.verification_request import VerificationRequest
from shiftlink.schemas.employer import (
    VerificationCreate,
    VerificationDecision,
    VerificationDetail,
    VerificationResponse,
)
from shiftlink.services.employer_service import VerificationService

router = APIRouter()


def _detail(request: VerificationRequest) -> VerificationDetail:
    employer = request.employer
    return VerificationDetail(
        **VerificationResponse.model_validate(request).model_dump(),
        employer_name=employer.user.name,
        employer_email=employer.user.email,
        company_name=employer.company_name,
    )


@router.post("", response_model=VerificationDetail, status_code=status.HTTP_201_CREATED)
async def submit_verification(
    payload: VerificationCreate,
    actor: ActorContext = Depends(require_employer),
    db: AsyncSession = Depends(get_db),
):
    """Submit a verification request for the calling employer."""
    request = await VerificationService(db).submit(
        actor,
        business_license=payload.business_license,
        tax_id=payload.tax_id,
        verification_documents=payload.verification_documents,
    )
    return _detail(request)


@router.get("", response_model=List[VerificationDetail])
async def list_verification_requests(
    status_filter: Optional[str] = Query(None, alias="status"),
    actor: ActorContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """All verification requests, newest first (admin only)."""
    requests = await VerificationService(db).list(status_filter)
    return [_detail(request) for request in requests]


@router.get("/{request_id}", response_model=VerificationDetail)
async def get_verification_request(
    request_id: UUID,
    actor: ActorContext = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Get a verification request (owning employer or admin)."""
    return _detail(await VerificationService(db).get(request_id, actor))


@router.patch("/{request_id}", response_model=VerificationDetail)
async def review_verification_request(
    request_id: UUID,
    payload: VerificationDecision,
    actor: ActorContext = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Approve or reject a pending request (admin only)."""
    return _detail(await VerificationService(db).review(request_id, payload.status, actor))

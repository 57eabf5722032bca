"""User profile endpoints (self or admin)."""

from uuid import UUID

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from shiftlink.api.deps import ActorContext, get_actor, get_db
from shiftlink.api.v1.auth import build_user_response
from shiftlink.core.exceptions import Conflict, Forbidden, NotFound
from shiftlink.core.security import get_password_hash
from shiftlink.models.user import User
from shiftlink.schemas.auth import EmployerProfile, StudentProfile, UserDetailResponse, UserUpdate
from shiftlink.schemas.base import SuccessResponse

logger = structlog.get_logger(__name__)

router = APIRouter()

USER_FIELDS = ("name", "email", "image", "country", "language")
STUDENT_FIELDS = (
    "bio",
    "school",
    "major",
    "graduation_year",
    "skills",
    "availability",
    "resume",
    "visa_type",
    "work_hours_limit",
)
EMPLOYER_FIELDS = ("company_name", "industry", "website", "description", "logo")


async def _load_user(db: AsyncSession, user_id: UUID, actor: ActorContext) -> User:
    if not actor.is_admin and actor.id != user_id:
        raise Forbidden("You can only access your own account")

    result = await db.execute(
        select(User)
        .options(selectinload(User.student), selectinload(User.employer))
        .where(User.id == user_id)
    )
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFound("User not found")
    return user


def _detail(user: User) -> UserDetailResponse:
    base = build_user_response(user).model_dump()
    return UserDetailResponse(
        **base,
        student=StudentProfile.model_validate(user.student) if user.student else None,
        employer=EmployerProfile.model_validate(user.employer) if user.employer else None,
    )


@router.get("/{user_id}", response_model=UserDetailResponse)
async def get_user(
    user_id: UUID,
    actor: ActorContext = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Get a user with its student or employer profile."""
    return _detail(await _load_user(db, user_id, actor))


@router.patch("/{user_id}", response_model=UserDetailResponse)
async def update_user(
    user_id: UUID,
    payload: UserUpdate,
    actor: ActorContext = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """
    Update base fields and the matching profile fields in one transaction.

    Profile fields that don't apply to the user's role are ignored.
    """
    user = await _load_user(db, user_id, actor)
    changes = payload.model_dump(exclude_unset=True)

    if "email" in changes and changes["email"]:
        changes["email"] = changes["email"].lower()
        if changes["email"] != user.email:
            result = await db.execute(select(User.id).where(User.email == changes["email"]))
            if result.scalar_one_or_none() is not None:
                raise Conflict("Email is already in use")

    password = changes.pop("password", None)
    if password:
        user.password_hash = get_password_hash(password)

    for field in USER_FIELDS:
        if field in changes and changes[field] is not None:
            setattr(user, field, changes[field])

    if user.student is not None:
        for field in STUDENT_FIELDS:
            if field in changes:
                setattr(user.student, field, changes[field])

    if user.employer is not None:
        for field in EMPLOYER_FIELDS:
            if field in changes and (field != "company_name" or changes[field]):
                setattr(user.employer, field, changes[field])

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict("Email is already in use")

    logger.info("user_updated", user_id=str(user_id), fields=sorted(changes))
    return _detail(user)


@router.delete("/{user_id}", response_model=SuccessResponse)
async def delete_user(
    user_id: UUID,
    actor: ActorContext = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Delete a user and its profile."""
    user = await _load_user(db, user_id, actor)
    await db.delete(user)
    await db.commit()

    logger.info("user_deleted", user_id=str(user_id), actor_id=str(actor.id))
    return SuccessResponse()

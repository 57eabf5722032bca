"""Authentication endpoints."""

import structlog
from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from shiftlink.api.deps import ActorContext, get_actor, get_db
from shiftlink.core.exceptions import Conflict, Forbidden, InvalidInput, NotFound, Unauthorized
from shiftlink.core.security import (
    Role,
    create_access_token,
    create_refresh_token,
    get_password_hash,
    verify_password,
)
from shiftlink.models.employer import Employer
from shiftlink.models.student import Student
from shiftlink.models.user import User
from shiftlink.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserResponse

logger = structlog.get_logger(__name__)

router = APIRouter()

SELF_REGISTER_ROLES = (Role.STUDENT.value, Role.EMPLOYER.value)


def build_user_response(user: User) -> UserResponse:
    """User fields plus the ids of its role profile (profiles must be loaded)."""
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        country=user.country,
        language=user.language,
        image=user.image,
        is_active=user.is_active,
        student_id=user.student.id if user.student else None,
        employer_id=user.employer.id if user.employer else None,
        created_at=user.created_at,
    )


def _token_response(user: User) -> TokenResponse:
    claims = {"sub": str(user.id), "role": user.role}
    return TokenResponse(
        access_token=create_access_token(claims),
        refresh_token=create_refresh_token(claims),
        token_type="bearer",
        user=build_user_response(user),
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Register a student or employer; the role profile is created with the user."""
    role = (request.role or Role.STUDENT.value).lower()
    if role not in SELF_REGISTER_ROLES:
        raise InvalidInput("Role must be 'student' or 'employer'")

    email = request.email.lower()
    result = await db.execute(select(User.id).where(User.email == email))
    if result.scalar_one_or_none() is not None:
        raise Conflict("User with this email already exists")

    new_user = User(
        name=request.name,
        email=email,
        password_hash=get_password_hash(request.password),
        role=role,
        country=request.country,
        is_active=True,
    )
    if role == Role.STUDENT.value:
        new_user.student = Student(skills=[])
        new_user.employer = None
    else:
        new_user.employer = Employer(company_name=request.company_name or request.name)
        new_user.student = None

    db.add(new_user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict("User with this email already exists")

    logger.info("user_registered", user_id=str(new_user.id), role=role)
    return _token_response(new_user)


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Login with email and password."""
    result = await db.execute(
        select(User)
        .options(selectinload(User.student), selectinload(User.employer))
        .where(User.email == request.email.lower())
    )
    user = result.scalar_one_or_none()

    if not user or not verify_password(request.password, user.password_hash):
        logger.info("login_failed", email=request.email)
        raise Unauthorized("Incorrect email or password")

    if not user.is_active:
        raise Forbidden("User account is inactive")

    return _token_response(user)


@router.get("/me", response_model=UserResponse)
async def get_me(actor: ActorContext = Depends(get_actor), db: AsyncSession = Depends(get_db)):
    """Get current user information."""
    result = await db.execute(
        select(User)
        .options(selectinload(User.student), selectinload(User.employer))
        .where(User.id == actor.id)
    )
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFound("User not found")
    return build_user_response(user)

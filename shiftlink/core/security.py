"""Security utilities: JWT, password hashing, actor resolution."""

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Optional
from uuid import UUID

import bcrypt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from shiftlink.config import settings
from shiftlink.core.exceptions import Forbidden, Unauthorized
from shiftlink.db.base import utcnow
from shiftlink.db.session import get_db
from shiftlink.models.user import User

# HTTPBearer for simple token authentication in Swagger (just paste the access token)
security = HTTPBearer(auto_error=False)


class Role(str, Enum):
    """User roles."""

    ADMIN = "admin"
    STUDENT = "student"
    EMPLOYER = "employer"


@dataclass(frozen=True)
class ActorContext:
    """Identity of the caller, resolved once per request."""

    id: UUID
    role: Role
    student_id: Optional[UUID] = None
    employer_id: Optional[UUID] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def owns_employer(self, employer_id: UUID) -> bool:
        return self.role == Role.EMPLOYER and self.employer_id == employer_id

    def owns_student(self, student_id: UUID) -> bool:
        return self.role == Role.STUDENT and self.student_id == student_id


def get_password_hash(password: str) -> str:
    """Hash a password with bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: Optional[str]) -> bool:
    """Check a password against a stored bcrypt hash."""
    if not password_hash:
        return False
    return bcrypt.checkpw(plain_password.encode("utf-8"), password_hash.encode("utf-8"))


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    if expires_delta:
        expire = utcnow() + expires_delta
    else:
        expire = utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_refresh_token(data: dict) -> str:
    """Create JWT refresh token."""
    to_encode = data.copy()
    expire = utcnow() + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    to_encode.update({"exp": expire, "type": "refresh"})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise Unauthorized("Could not validate credentials")


def actor_from_user(user: User) -> ActorContext:
    """Build the actor context from a user with its profiles loaded."""
    return ActorContext(
        id=user.id,
        role=Role(user.role),
        student_id=user.student.id if user.student else None,
        employer_id=user.employer.id if user.employer else None,
    )


async def get_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> ActorContext:
    """Resolve the Bearer token into an ActorContext."""
    if credentials is None:
        raise Unauthorized()

    payload = decode_token(credentials.credentials)
    if payload.get("type") != "access" or payload.get("sub") is None:
        raise Unauthorized("Could not validate credentials")

    try:
        user_id = UUID(payload["sub"])
    except ValueError:
        raise Unauthorized("Could not validate credentials")

    result = await db.execute(
        select(User)
        .options(selectinload(User.student), selectinload(User.employer))
        .where(User.id == user_id)
    )
    user = result.scalar_one_or_none()

    if user is None:
        raise Unauthorized("User not found")

    if not user.is_active:
        raise Forbidden("Inactive user")

    return actor_from_user(user)


def require_role(*allowed_roles: Role):
    """Dependency to check if the actor has one of the required roles."""

    async def role_checker(actor: ActorContext = Depends(get_actor)) -> ActorContext:
        if actor.role not in allowed_roles:
            raise Forbidden(
                f"Insufficient permissions. Required: {[r.value for r in allowed_roles]}"
            )
        return actor

    return role_checker


require_admin = require_role(Role.ADMIN)
require_student = require_role(Role.STUDENT)
require_employer = require_role(Role.EMPLOYER)


async def get_actor_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> Optional[ActorContext]:
    """Resolve the actor if a valid token is present, None otherwise."""
    if credentials is None:
        return None
    try:
        return await get_actor(credentials, db)
    except (Unauthorized, Forbidden):
        return None

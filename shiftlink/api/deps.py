"""
API Dependencies
Common dependencies for API endpoints (database session, actor, roles, API key)
"""

from typing import Optional

from fastapi import Header

from shiftlink.config import settings
from shiftlink.core.exceptions import Unauthorized
from shiftlink.core.security import (
    ActorContext,
    get_actor,
    get_actor_optional,
    require_admin,
    require_employer,
    require_role,
    require_student,
)
from shiftlink.db.session import get_db

__all__ = [
    "ActorContext",
    "get_actor",
    "get_actor_optional",
    "get_db",
    "require_admin",
    "require_employer",
    "require_role",
    "require_student",
    "verify_api_key",
]


async def verify_api_key(x_api_key: Optional[str] = Header(None)) -> None:
    """Guard for internal endpoints: X-API-Key must match ANALYTICS_API_KEY."""
    if not settings.ANALYTICS_API_KEY or x_api_key != settings.ANALYTICS_API_KEY:
        raise Unauthorized("Invalid API key")

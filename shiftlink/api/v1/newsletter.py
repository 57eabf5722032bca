"""Newsletter waitlist endpoint (public)."""

import structlog
from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shiftlink.api.deps import get_db
from shiftlink.core.exceptions import Conflict
from shiftlink.models.waitlist import WaitlistEntry
from shiftlink.schemas.newsletter import WaitlistCreate, WaitlistResponse

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("", response_model=WaitlistResponse, status_code=status.HTTP_201_CREATED)
async def join_waitlist(payload: WaitlistCreate, db: AsyncSession = Depends(get_db)):
    """Add an email to the early-access waitlist."""
    entry = WaitlistEntry(
        user_type=payload.user_type,
        location=payload.location,
        country=payload.country,
        email=payload.email.lower(),
        mobile=payload.mobile or None,
        interests=payload.interests,
    )
    db.add(entry)

    # Unique email index is the duplicate check
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict("This email is already registered for early access!")

    logger.info("waitlist_joined", entry_id=str(entry.id), user_type=entry.user_type)
    return WaitlistResponse(id=entry.id)

"""Newsletter waitlist schemas."""

from typing import List, Literal, Optional
from uuid import UUID

from pydantic import EmailStr, Field

from shiftlink.schemas.base import CamelModel


class WaitlistCreate(CamelModel):
    """Early-access sign-up."""

    user_type: Literal["JOB_SEEKER", "EMPLOYER"]
    location: str = Field(..., min_length=1, max_length=255)
    country: Optional[str] = Field(None, max_length=100)
    email: EmailStr
    mobile: Optional[str] = Field(None, max_length=50)
    interests: List[str] = Field(default_factory=list)


class WaitlistResponse(CamelModel):
    message: str = "Successfully added to waitlist!"
    id: UUID

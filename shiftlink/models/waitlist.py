"""Early-access waitlist model."""

from sqlalchemy import JSON, Column, String

from shiftlink.db.base import Base


class WaitlistEntry(Base):
    """Newsletter sign-up collected before launch."""

    __tablename__ = "waitlist_entries"

    user_type = Column(String(20), nullable=False)  # JOB_SEEKER or EMPLOYER
    location = Column(String(255), nullable=False)
    country = Column(String(100))
    email = Column(String(255), unique=True, nullable=False, index=True)
    mobile = Column(String(50))
    interests = Column(JSON, default=list)

    def __repr__(self):
        return f"<WaitlistEntry {self.email}>"

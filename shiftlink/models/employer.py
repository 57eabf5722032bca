"""Employer model."""

from sqlalchemy import Boolean, Column, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from shiftlink.db.base import Base


class Employer(Base):
    """Employer profile model."""

    __tablename__ = "employers"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    company_name = Column(String(255), nullable=False, index=True)
    industry = Column(String(100))
    website = Column(String(500))
    description = Column(Text)
    logo = Column(String(500))

    # Trust markers
    is_verified = Column(Boolean, default=False, nullable=False)
    is_flagged = Column(Boolean, default=False, nullable=False)
    flag_reason = Column(Text)

    # Relationships
    user = relationship("User", back_populates="employer")
    jobs = relationship("Job", back_populates="employer", cascade="all, delete")
    reviews = relationship("Review", back_populates="employer", passive_deletes=True)
    verification_requests = relationship(
        "VerificationRequest", back_populates="employer", cascade="all, delete"
    )

    def __repr__(self):
        return f"<Employer {self.company_name}>"

"""Employer verification request model."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, String, Uuid, text
from sqlalchemy.orm import relationship

from shiftlink.db.base import Base, utcnow


class VerificationRequest(Base):
    """Request by an employer for the verified badge."""

    __tablename__ = "verification_requests"

    employer_id = Column(Uuid(as_uuid=True), ForeignKey("employers.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="PENDING")  # PENDING, APPROVED, REJECTED

    business_license = Column(String(255))
    tax_id = Column(String(100))
    verification_documents = Column(JSON, default=list)  # URLs or filenames

    submitted_at = Column(DateTime, default=utcnow, nullable=False)
    reviewed_at = Column(DateTime)
    reviewed_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"))

    # Relationships
    employer = relationship("Employer", back_populates="verification_requests")

    __table_args__ = (
        # At most one outstanding request per employer
        Index(
            "idx_verification_one_pending",
            "employer_id",
            unique=True,
            postgresql_where=text("status = 'PENDING'"),
            sqlite_where=text("status = 'PENDING'"),
        ),
    )

    def __repr__(self):
        return f"<VerificationRequest {self.employer_id} ({self.status})>"

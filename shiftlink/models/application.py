"""Application model."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from shiftlink.db.base import Base, utcnow


class Application(Base):
    """A student's application to a job."""

    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("job_id", "student_id", name="unique_job_student_application"),
    )

    job_id = Column(Uuid(as_uuid=True), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Uuid(as_uuid=True), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)

    # Status tracking
    status = Column(String(20), nullable=False, default="PENDING")  # PENDING, APPROVED, REJECTED
    is_completed = Column(Boolean, default=False, nullable=False)
    completed_at = Column(DateTime)

    notes = Column(Text)
    applied_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    # Relationships
    student = relationship("Student", back_populates="applications")
    job = relationship("Job", back_populates="applications")
    review = relationship("Review", back_populates="application", uselist=False, cascade="all, delete")

    def __repr__(self):
        return f"<Application {self.student_id} -> {self.job_id} ({self.status})>"

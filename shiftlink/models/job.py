"""Job model."""

from sqlalchemy import Boolean, Column, Float, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship

from shiftlink.db.base import Base


class Job(Base):
    """Part-time job posting."""

    __tablename__ = "jobs"

    employer_id = Column(Uuid(as_uuid=True), ForeignKey("employers.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    requirements = Column(Text)
    country = Column(String(100), default="Unknown")

    # Pay and schedule
    hourly_rate = Column(Float, nullable=False)
    hours_per_week = Column(Integer, nullable=False)
    shift_times = Column(String(255))

    is_premium = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    employer = relationship("Employer", back_populates="jobs")
    applications = relationship("Application", back_populates="job", cascade="all, delete")

    __table_args__ = (
        Index("idx_jobs_active_created", "is_active", "created_at"),
    )

    def __repr__(self):
        return f"<Job {self.title}>"

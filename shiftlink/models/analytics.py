"""Daily analytics snapshot model."""

from sqlalchemy import Column, Date, Index, Integer, String

from shiftlink.db.base import Base, utcnow


class AnalyticsSnapshot(Base):
    """Activity counts for one day, globally or for one country."""

    __tablename__ = "analytics"

    date = Column(Date, nullable=False, default=lambda: utcnow().date())
    country = Column(String(100), nullable=False, default="global")

    new_students = Column(Integer, default=0, nullable=False)
    new_employers = Column(Integer, default=0, nullable=False)
    new_jobs = Column(Integer, default=0, nullable=False)
    applications = Column(Integer, default=0, nullable=False)
    completed_jobs = Column(Integer, default=0, nullable=False)

    __table_args__ = (
        Index("idx_analytics_country_date", "country", "date"),
    )

    def __repr__(self):
        return f"<AnalyticsSnapshot {self.date} {self.country}>"

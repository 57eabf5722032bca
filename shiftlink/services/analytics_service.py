"""Analytics aggregation for the admin dashboard and the daily snapshot job."""

from datetime import date, datetime, time, timedelta
from typing import Optional

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shiftlink.db.base import utcnow
from shiftlink.models.analytics import AnalyticsSnapshot
from shiftlink.models.application import Application
from shiftlink.models.employer import Employer
from shiftlink.models.job import Job
from shiftlink.models.student import Student
from shiftlink.models.user import User

logger = structlog.get_logger(__name__)

PERIODS = {
    "day": timedelta(days=1),
    "week": timedelta(days=7),
    "month": timedelta(days=30),
    "year": timedelta(days=365),
}

GLOBAL = "global"


class AnalyticsService:
    """Dashboard reads and snapshot writes."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _count(self, query) -> int:
        result = await self.db.execute(query)
        return result.scalar() or 0

    async def dashboard(self, period: str = "week", country: str = GLOBAL) -> dict:
        """Time series since the period start plus platform-wide counts."""
        start = (utcnow() - PERIODS.get(period, PERIODS["week"])).date()

        series_query = select(AnalyticsSnapshot).where(AnalyticsSnapshot.date >= start)
        series_query = series_query.where(AnalyticsSnapshot.country == (country or GLOBAL))
        result = await self.db.execute(series_query.order_by(AnalyticsSnapshot.date.asc()))
        time_series = list(result.scalars().all())

        summary = {
            "student_count": await self._count(select(func.count(Student.id))),
            "employer_count": await self._count(select(func.count(Employer.id))),
            "job_count": await self._count(select(func.count(Job.id))),
            "application_count": await self._count(select(func.count(Application.id))),
            "completed_job_count": await self._count(
                select(func.count(Application.id)).where(Application.is_completed.is_(True))
            ),
        }

        result = await self.db.execute(
            select(User.country, func.count(User.id)).group_by(User.country)
        )
        country_distribution = [
            {"country": row_country, "count": count} for row_country, count in result.all()
        ]

        job_count = func.count(Job.id).label("job_count")
        result = await self.db.execute(
            select(Job.title, job_count).group_by(Job.title).order_by(job_count.desc()).limit(10)
        )
        job_category_distribution = [
            {"category": title, "count": count} for title, count in result.all()
        ]

        return {
            "time_series": time_series,
            "summary": summary,
            "country_distribution": country_distribution,
            "job_category_distribution": job_category_distribution,
        }

    async def record(self, counts: dict) -> AnalyticsSnapshot:
        """Store counts pushed by an internal caller for today."""
        snapshot = AnalyticsSnapshot(
            date=utcnow().date(),
            country=counts.get("country") or GLOBAL,
            new_students=counts.get("new_students", 0),
            new_employers=counts.get("new_employers", 0),
            new_jobs=counts.get("new_jobs", 0),
            applications=counts.get("applications", 0),
            completed_jobs=counts.get("completed_jobs", 0),
        )
        self.db.add(snapshot)
        await self.db.commit()
        return snapshot

    async def take_daily_snapshot(self, day: Optional[date] = None) -> int:
        """
        Count one day's activity (yesterday by default).

        Writes a global row plus one row per country that gained users that
        day. Application and completion counts are only kept globally.
        Returns the number of rows written.
        """
        day = day or (utcnow().date() - timedelta(days=1))
        start = datetime.combine(day, time.min)
        end = start + timedelta(days=1)

        def in_window(column):
            return column >= start, column < end

        new_students = select(func.count(Student.id)).join(User, Student.user_id == User.id).where(
            *in_window(User.created_at)
        )
        new_employers = select(func.count(Employer.id)).join(User, Employer.user_id == User.id).where(
            *in_window(User.created_at)
        )
        new_jobs = select(func.count(Job.id)).where(*in_window(Job.created_at))

        snapshots = [
            AnalyticsSnapshot(
                date=day,
                country=GLOBAL,
                new_students=await self._count(new_students),
                new_employers=await self._count(new_employers),
                new_jobs=await self._count(new_jobs),
                applications=await self._count(
                    select(func.count(Application.id)).where(*in_window(Application.applied_at))
                ),
                completed_jobs=await self._count(
                    select(func.count(Application.id)).where(*in_window(Application.completed_at))
                ),
            )
        ]

        result = await self.db.execute(
            select(User.country)
            .where(*in_window(User.created_at), User.country.isnot(None))
            .distinct()
        )
        for country in result.scalars().all():
            snapshots.append(
                AnalyticsSnapshot(
                    date=day,
                    country=country,
                    new_students=await self._count(new_students.where(User.country == country)),
                    new_employers=await self._count(new_employers.where(User.country == country)),
                    new_jobs=await self._count(new_jobs.where(Job.country == country)),
                    applications=0,
                    completed_jobs=0,
                )
            )

        self.db.add_all(snapshots)
        await self.db.commit()

        logger.info("analytics_snapshot_recorded", day=day.isoformat(), records=len(snapshots))
        return len(snapshots)

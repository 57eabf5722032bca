"""
Application Scheduler - APScheduler Integration

Runs the daily analytics snapshot inside the API process. The same work is
reachable over HTTP at POST /api/v1/cron/analytics for external cron.
"""

import structlog
from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from shiftlink.config import settings

logger = structlog.get_logger(__name__)

# Global scheduler instance
scheduler = AsyncIOScheduler(
    timezone="UTC",
    job_defaults={
        "coalesce": True,  # Combine multiple missed executions into one
        "max_instances": 1,
        "misfire_grace_time": 3600,  # Job can run up to 1 hour late
    },
)


def scheduler_listener(event):
    """Log executed and failed jobs."""
    if event.exception:
        logger.error("scheduled_job_failed", job_id=event.job_id, error=str(event.exception))
    else:
        logger.info("scheduled_job_executed", job_id=event.job_id)


scheduler.add_listener(scheduler_listener, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)


async def run_analytics_snapshot() -> int:
    """Scheduled task: record yesterday's platform activity."""
    from shiftlink.db.session import AsyncSessionLocal
    from shiftlink.services.analytics_service import AnalyticsService

    async with AsyncSessionLocal() as db:
        return await AnalyticsService(db).take_daily_snapshot()


def setup_jobs():
    scheduler.add_job(
        run_analytics_snapshot,
        CronTrigger(hour=settings.ANALYTICS_SNAPSHOT_HOUR, minute=0),
        id="daily_analytics_snapshot",
        name="Daily analytics snapshot",
        replace_existing=True,
    )
    logger.info("scheduled_job_added", job_id="daily_analytics_snapshot", hour=settings.ANALYTICS_SNAPSHOT_HOUR)


def start_scheduler():
    """Start the scheduler if enabled; called from the app lifespan."""
    if not settings.ANALYTICS_SCHEDULER_ENABLED:
        logger.info("scheduler_disabled")
        return

    if scheduler.running:
        logger.warning("scheduler_already_running")
        return

    setup_jobs()
    scheduler.start()
    for job in scheduler.get_jobs():
        logger.info("scheduler_job_registered", job_id=job.id, next_run=str(job.next_run_time))


def stop_scheduler():
    if scheduler.running:
        scheduler.shutdown(wait=True)
        logger.info("scheduler_stopped")

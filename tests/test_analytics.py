"""Analytics dashboard, internal recording and the daily snapshot."""

from datetime import timedelta

from sqlalchemy import select

from shiftlink.core.scheduler import run_analytics_snapshot, scheduler, setup_jobs, start_scheduler
from shiftlink.db.base import utcnow
from shiftlink.models.analytics import AnalyticsSnapshot
from shiftlink.services.analytics_service import AnalyticsService

API_KEY = "test-analytics-key"


async def test_snapshot_counts_one_day(db, seed):
    employer = await seed.employer("Corner Cafe", country="Japan")
    await seed.student("Aiko", country="Japan")
    await seed.student("Bruno", country="Brazil")
    job = await seed.job(employer)

    today = utcnow().date()
    written = await AnalyticsService(db).take_daily_snapshot(today)
    assert written == 3  # global + Japan + Brazil

    rows = (await db.execute(select(AnalyticsSnapshot).where(AnalyticsSnapshot.date == today))).scalars().all()
    by_country = {row.country: row for row in rows}
    assert by_country["global"].new_students == 2
    assert by_country["global"].new_employers == 1
    assert by_country["global"].new_jobs == 1
    assert by_country["Japan"].new_students == 1
    assert by_country["Japan"].new_employers == 1
    assert by_country["Brazil"].new_students == 1
    assert by_country["Brazil"].new_jobs == 0
    assert job.country == "Japan"


async def test_snapshot_of_quiet_day_writes_global_row_only(db, seed):
    await seed.student()
    written = await AnalyticsService(db).take_daily_snapshot(utcnow().date() - timedelta(days=3))
    assert written == 1


async def test_dashboard_requires_admin(client, seed, headers):
    student = await seed.student()
    response = await client.get("/api/v1/analytics", headers=headers(student))
    assert response.status_code == 403


async def test_dashboard_summary(client, seed, headers):
    admin = await seed.admin()
    employer = await seed.employer(country="Japan")
    student = await seed.student(country="Japan")
    job = await seed.job(employer, title="Barista")
    await seed.job(employer, title="Barista")
    await seed.application(job, student, status="APPROVED", is_completed=True)

    response = await client.get("/api/v1/analytics", params={"period": "month"}, headers=headers(admin))
    assert response.status_code == 200
    body = response.json()
    assert body["summary"] == {
        "studentCount": 1,
        "employerCount": 1,
        "jobCount": 2,
        "applicationCount": 1,
        "completedJobCount": 1,
    }
    assert body["jobCategoryDistribution"][0] == {"category": "Barista", "count": 2}
    assert {"country": "Japan", "count": 2} in body["countryDistribution"]


async def test_record_requires_api_key(client):
    response = await client.post("/api/v1/analytics", json={"newStudents": 3})
    assert response.status_code == 401

    response = await client.post(
        "/api/v1/analytics", json={"newStudents": 3}, headers={"X-API-Key": "wrong"}
    )
    assert response.status_code == 401


async def test_record_then_read_time_series(client, seed, headers):
    admin = await seed.admin()

    recorded = await client.post(
        "/api/v1/analytics",
        json={"newStudents": 3, "newJobs": 2},
        headers={"X-API-Key": API_KEY},
    )
    assert recorded.status_code == 201
    assert recorded.json()["country"] == "global"

    dashboard = await client.get("/api/v1/analytics", params={"period": "day"}, headers=headers(admin))
    series = dashboard.json()["timeSeries"]
    assert len(series) == 1
    assert series[0]["newStudents"] == 3
    assert series[0]["newJobs"] == 2


async def test_cron_endpoint_takes_snapshot(client, seed):
    await seed.student()

    response = await client.post("/api/v1/cron/analytics", headers={"X-API-Key": API_KEY})
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["recordsCreated"] >= 1


def test_scheduler_stays_off_when_disabled():
    start_scheduler()
    assert not scheduler.running


def test_snapshot_job_registration():
    setup_jobs()
    try:
        job = scheduler.get_job("daily_analytics_snapshot")
        assert job is not None
        assert job.func is run_analytics_snapshot
    finally:
        scheduler.remove_job("daily_analytics_snapshot")

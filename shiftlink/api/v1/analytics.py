"""Analytics endpoints: admin dashboard, internal recording and the daily cron."""

from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from shiftlink.api.deps import ActorContext, get_db, require_admin, verify_api_key
from shiftlink.schemas.analytics import (
    AnalyticsRecord,
    AnalyticsResponse,
    AnalyticsSnapshotResponse,
    SnapshotResult,
)
from shiftlink.services.analytics_service import GLOBAL, AnalyticsService

router = APIRouter()


@router.get("/analytics", response_model=AnalyticsResponse)
async def get_analytics(
    period: Literal["day", "week", "month", "year"] = Query("week"),
    country: str = Query(GLOBAL),
    actor: ActorContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Dashboard time series and platform totals (admin only)."""
    dashboard = await AnalyticsService(db).dashboard(period, country)
    dashboard["time_series"] = [
        AnalyticsSnapshotResponse.model_validate(snapshot) for snapshot in dashboard["time_series"]
    ]
    return AnalyticsResponse(**dashboard)


@router.post(
    "/analytics",
    response_model=AnalyticsSnapshotResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(verify_api_key)],
)
async def record_analytics(payload: AnalyticsRecord, db: AsyncSession = Depends(get_db)):
    """Store counts pushed by an internal job."""
    return await AnalyticsService(db).record(payload.model_dump())


@router.post("/cron/analytics", response_model=SnapshotResult, dependencies=[Depends(verify_api_key)])
async def run_analytics_cron(db: AsyncSession = Depends(get_db)):
    """Record yesterday's activity; called by an external scheduler."""
    records_created = await AnalyticsService(db).take_daily_snapshot()
    return SnapshotResult(success=True, records_created=records_created)

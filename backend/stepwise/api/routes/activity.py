"""Activity analytics API routes."""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from stepwise.api.schemas.activity import (
    ActivityHistogramResponse,
    ActivityMetricsPayload,
    ActivityMetricsResponse,
    DateWindow,
)
from stepwise.core.config import settings
from stepwise.db.deps import get_db
from stepwise.observability.metrics import log_metric
from stepwise.observability.tracing import trace
from stepwise.scheduling.periods import PeriodType
from stepwise.services.activity_service import get_activity_histogram, get_activity_summary

router = APIRouter(prefix="/activity", tags=["activity"])


@router.get("/metrics", response_model=ActivityMetricsResponse)
def get_activity_metrics(
    http_request: Request,
    user_id: UUID = Query(..., description="User ID"),
    period: PeriodType = Query(PeriodType.WEEK),
    offset: int = Query(0, le=0, description="0 = current period, -1 = the one before, ..."),
    today: Optional[date] = Query(default=None, description="Reference day; defaults to the server date"),
    db: Session = Depends(get_db),
) -> ActivityMetricsResponse:
    request_id = getattr(http_request.state, "request_id", None)
    reference_day = today or date.today()
    start_time = datetime.now(timezone.utc)

    with trace(
        "activity.metrics",
        metadata={"period": period.value, "offset": offset, "today": reference_day.isoformat()},
        user_id=str(user_id),
        request_id=request_id,
    ):
        summary = get_activity_summary(
            db,
            user_id,
            period_type=period,
            offset=offset,
            today=reference_day,
            week_start=settings.week_start,
        )

    latency_ms = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000
    log_metric("activity.metrics.success_rate", summary.metrics.success_rate, metadata={"user_id": str(user_id)})
    log_metric("activity.metrics.latency_ms", latency_ms, metadata={"user_id": str(user_id)})

    return ActivityMetricsResponse(
        user_id=user_id,
        period=period.value,
        offset=offset,
        title=summary.title,
        window=DateWindow(start=summary.period.start, end=summary.period.end),
        range_label=summary.range_label,
        metrics=ActivityMetricsPayload(**summary.metrics.to_dict()),
        request_id=request_id or "",
    )


@router.get("/histogram", response_model=ActivityHistogramResponse)
def get_activity_histogram_endpoint(
    http_request: Request,
    user_id: UUID = Query(..., description="User ID"),
    period: PeriodType = Query(PeriodType.WEEK),
    count: Optional[int] = Query(default=None, ge=1, le=52, description="Number of buckets"),
    until: Optional[date] = Query(default=None, description="Day inside the newest bucket"),
    db: Session = Depends(get_db),
) -> ActivityHistogramResponse:
    request_id = getattr(http_request.state, "request_id", None)
    bucket_count = count or settings.histogram_periods
    anchor = until or date.today()

    with trace(
        "activity.histogram",
        metadata={"period": period.value, "count": bucket_count, "until": anchor.isoformat()},
        user_id=str(user_id),
        request_id=request_id,
    ):
        histogram = get_activity_histogram(
            db,
            user_id,
            period_type=period,
            count=bucket_count,
            until=anchor,
            week_start=settings.week_start,
        )

    log_metric("activity.histogram.highest", histogram.highest, metadata={"user_id": str(user_id)})

    return ActivityHistogramResponse(
        user_id=user_id,
        period=period.value,
        starts=histogram.starts,
        counts=histogram.counts,
        labels=histogram.labels,
        highest=histogram.highest,
        request_id=request_id or "",
    )

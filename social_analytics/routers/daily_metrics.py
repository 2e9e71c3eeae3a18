"""
Daily metrics endpoints

/daily-metrics silently drops invalid dates. /metrics/daily additionally
rejects a range whose start is after its end.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from social_analytics.auth import get_analytics_store
from social_analytics.database.analytics_db import AnalyticsStore
from social_analytics.errors import BackendFailure
from social_analytics.responses import error_response, failure_response, success_response
from social_analytics.services.validation import validate_date_param

logger = logging.getLogger(__name__)

router = APIRouter(tags=["daily-metrics"])

INVALID_RANGE_MESSAGE = "Invalid date range: startDate must be before or equal to endDate"


def _fetch_daily_metrics(store: AnalyticsStore, start_date: Optional[str], end_date: Optional[str]):
    try:
        metrics = store.list_daily_metrics(start_date, end_date)
    except BackendFailure as e:
        return failure_response(e, "Failed to fetch daily metrics")
    return success_response(metrics)


@router.get("/daily-metrics")
def list_daily_metrics(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    store: AnalyticsStore = Depends(get_analytics_store),
):
    return _fetch_daily_metrics(store, validate_date_param(start_date), validate_date_param(end_date))


@router.get("/metrics/daily")
def list_daily_metrics_checked(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    store: AnalyticsStore = Depends(get_analytics_store),
):
    start = validate_date_param(start_date)
    end = validate_date_param(end_date)

    # Same fixed-width format on both sides, so string order is date order
    if start and end and start > end:
        return error_response(INVALID_RANGE_MESSAGE, 400)

    return _fetch_daily_metrics(store, start, end)

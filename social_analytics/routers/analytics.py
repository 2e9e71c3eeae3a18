"""
Analytics summary endpoint
"""

import logging

from fastapi import APIRouter, Depends

from social_analytics.auth import get_analytics_store
from social_analytics.database.analytics_db import AnalyticsStore
from social_analytics.errors import BackendFailure
from social_analytics.responses import failure_response, success_response
from social_analytics.services.analytics_service import build_analytics_summary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/summary")
def get_analytics_summary(store: AnalyticsStore = Depends(get_analytics_store)):
    """
    Aggregate the current user's posts into the dashboard summary.

    A user with no posts gets an all-zero summary, not an error.
    """
    try:
        posts = store.list_all_posts()
    except BackendFailure as e:
        return failure_response(e, "Failed to fetch analytics data")

    summary = build_analytics_summary(posts)
    logger.info(f"📊 Built analytics summary for user {store.user_id} from {len(posts)} post(s)")

    return success_response(summary.model_dump(by_alias=True))

"""
ANALYTICS SUMMARY AGGREGATION

Purpose:
--------
Turns a user's post rows into the dashboard summary: totals, averages,
current-vs-previous 30 day trend deltas and the top performing post.

Windows:
--------
- recent:   posted_at >= now - 30 days
- previous: now - 60 days <= posted_at < now - 30 days
- all:      every row, unfiltered

Reported fields:
----------------
- totalPosts, totalViews, totalReach, totalLikes, totalComments, totalShares
  come from the RECENT window
- totalEngagements and averageEngagementRate come from ALL posts
- topPost comes from ALL posts
- changes.* compare RECENT against PREVIOUS

The mixed windows are a product decision and are covered by tests.

Everything here is pure: no I/O, no clock reads unless `now` is omitted.
"""

import logging
import math
from datetime import datetime, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Mapping, Optional

from social_analytics.schemas.analytics import (
    AnalyticsSummary,
    MetricChanges,
    PeriodMetrics,
    TopPost,
)

logger = logging.getLogger(__name__)

WINDOW_DAYS = 30
ENGAGEMENT_FIELDS = ("likes", "comments", "shares", "saves")
NO_CAPTION = "No caption"


# ============================================================================
# FIELD HELPERS
# ============================================================================

def _counter(post: Mapping[str, Any], field: str) -> int:
    """Counter value with missing, null, malformed or non-finite values read as 0."""
    value = post.get(field)
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    if not math.isfinite(number):
        return 0
    return int(number)


def _engagement_rate(post: Mapping[str, Any]) -> Optional[float]:
    """Engagement rate, or None when it is unknown. Unknown is not zero."""
    value = post.get("engagement_rate")
    if value is None or isinstance(value, bool):
        return None
    try:
        rate = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return rate if math.isfinite(rate) else None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a stored timestamp into an aware UTC datetime. Naive values are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def post_engagement(post: Mapping[str, Any]) -> int:
    return sum(_counter(post, field) for field in ENGAGEMENT_FIELDS)


def round_half_up(value: float, places: int) -> float:
    """Round on the exact decimal value of `value`, halves away from zero."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


# ============================================================================
# METRICS
# ============================================================================

def compute_metrics(posts: Iterable[Mapping[str, Any]]) -> PeriodMetrics:
    post_list = list(posts)

    total_likes = sum(_counter(post, "likes") for post in post_list)
    total_comments = sum(_counter(post, "comments") for post in post_list)
    total_shares = sum(_counter(post, "shares") for post in post_list)
    total_saves = sum(_counter(post, "saves") for post in post_list)

    rates = [rate for rate in (_engagement_rate(post) for post in post_list) if rate is not None]
    average_rate = sum(rates) / len(rates) if rates else 0

    return PeriodMetrics(
        total_posts=len(post_list),
        total_views=sum(_counter(post, "impressions") for post in post_list),
        total_likes=total_likes,
        total_comments=total_comments,
        total_shares=total_shares,
        total_reach=sum(_counter(post, "reach") for post in post_list),
        total_engagements=total_likes + total_comments + total_shares + total_saves,
        average_engagement_rate=average_rate,
    )


def calculate_change(current: float, previous: float) -> float:
    """
    Percentage change from previous to current, one decimal place.

    A zero baseline reports 100 for any growth and 0 otherwise.
    """
    if previous == 0:
        return 100 if current > 0 else 0
    return round_half_up(((current - previous) / previous) * 100, 1)


def find_top_post(posts: Iterable[Mapping[str, Any]]) -> Optional[TopPost]:
    """Post with the highest likes+comments+shares+saves; the earliest one wins a tie."""
    top = None
    top_engagement = 0

    for post in posts:
        engagement = post_engagement(post)
        if top is None or engagement > top_engagement:
            top = post
            top_engagement = engagement

    if top is None:
        return None

    posted_at = top.get("posted_at")
    return TopPost(
        id=str(top.get("id", "")),
        caption=top.get("caption") or NO_CAPTION,
        engagement=top_engagement,
        posted_at=posted_at.isoformat() if isinstance(posted_at, datetime) else posted_at,
    )


def split_windows(posts: List[Mapping[str, Any]], now: datetime) -> Dict[str, List[Mapping[str, Any]]]:
    """Partition posts into the recent and previous windows. Unparseable dates land in neither."""
    recent_start = now - timedelta(days=WINDOW_DAYS)
    previous_start = recent_start - timedelta(days=WINDOW_DAYS)

    recent: List[Mapping[str, Any]] = []
    previous: List[Mapping[str, Any]] = []

    for post in posts:
        posted_at = parse_timestamp(post.get("posted_at"))
        if posted_at is None:
            continue
        if posted_at >= recent_start:
            recent.append(post)
        elif previous_start <= posted_at < recent_start:
            previous.append(post)

    return {"recent": recent, "previous": previous}


def build_analytics_summary(
    posts: Iterable[Mapping[str, Any]],
    now: Optional[datetime] = None,
) -> AnalyticsSummary:
    post_list = list(posts)

    if not post_list:
        return AnalyticsSummary()

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    windows = split_windows(post_list, now)
    recent = compute_metrics(windows["recent"])
    previous = compute_metrics(windows["previous"])
    overall = compute_metrics(post_list)

    logger.debug(
        f"📊 Summary windows - all: {len(post_list)}, recent: {recent.total_posts}, "
        f"previous: {previous.total_posts}"
    )

    changes = MetricChanges(
        total_posts=calculate_change(recent.total_posts, previous.total_posts),
        total_views=calculate_change(recent.total_views, previous.total_views),
        total_engagements=calculate_change(recent.total_engagements, previous.total_engagements),
        average_engagement_rate=calculate_change(
            recent.average_engagement_rate, previous.average_engagement_rate
        ),
        total_reach=calculate_change(recent.total_reach, previous.total_reach),
        total_likes=calculate_change(recent.total_likes, previous.total_likes),
        total_comments=calculate_change(recent.total_comments, previous.total_comments),
        total_shares=calculate_change(recent.total_shares, previous.total_shares),
    )

    return AnalyticsSummary(
        total_posts=recent.total_posts,
        total_views=recent.total_views,
        total_engagements=overall.total_engagements,
        average_engagement_rate=round_half_up(overall.average_engagement_rate, 2),
        total_reach=recent.total_reach,
        total_likes=recent.total_likes,
        total_comments=recent.total_comments,
        total_shares=recent.total_shares,
        top_post=find_top_post(post_list),
        changes=changes,
    )

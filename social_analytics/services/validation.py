"""
Query parameter and credential validation

Everything that arrives from a query string passes through here before it can
reach a database query. The parameter validators never raise: bad input turns
into None (or a default) instead.
"""

import re
from typing import Any, List, Optional

from social_analytics.schemas.analytics import PostFilters

ALLOWED_PLATFORMS = ["all", "instagram", "facebook", "twitter", "linkedin", "tiktok", "youtube"]

ALLOWED_MEDIA_TYPES = ["all", "image", "video", "carousel", "reel", "story"]

ALLOWED_POST_SORT_FIELDS = [
    "posted_at",
    "impressions",
    "likes",
    "comments",
    "shares",
    "reach",
    "engagement_rate",
    "platform",
    "media_type",
]

DEFAULT_POST_SORT_FIELD = "posted_at"
DEFAULT_SORT_ORDER = "desc"

MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_LENGTH = 128

_SAFE_TEXT_RE = re.compile(r"^[a-zA-Z0-9_\-\s]+$")
_ISO_DATE_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


# ============================================================================
# QUERY PARAMETERS
# ============================================================================

def validate_string_param(value: Any, allowed_values: Optional[List[str]] = None) -> Optional[str]:
    """
    Trim a string parameter and check it against an allow-list.

    With a non-empty allow-list the match is exact and case-sensitive. Without one,
    only letters, digits, underscores, dashes and whitespace are accepted.
    """
    if not value or not isinstance(value, str):
        return None

    sanitized = value.strip()

    if allowed_values:
        return sanitized if sanitized in allowed_values else None

    if _SAFE_TEXT_RE.fullmatch(sanitized):
        return sanitized

    return None


def validate_date_param(value: Any) -> Optional[str]:
    """
    Accept only YYYY-MM-DD dates.

    Month must be 01-12 and day 01-31; out-of-range days for a given month
    (e.g. 2024-02-30) roll over to the next month and are accepted.
    """
    if not value or not isinstance(value, str):
        return None

    sanitized = value.strip()
    if not _ISO_DATE_RE.fullmatch(sanitized):
        return None

    month, day = int(sanitized[5:7]), int(sanitized[8:10])
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        return None
    return sanitized


def validate_sort_order(value: Any) -> str:
    if value == "asc" or value == "desc":
        return value
    return DEFAULT_SORT_ORDER


def build_post_filters(
    platform: Any = None,
    media_type: Any = None,
    start_date: Any = None,
    end_date: Any = None,
    sort_field: Any = None,
    sort_order: Any = None,
    search: Any = None,
) -> PostFilters:
    """Turn raw /posts query parameters into a PostFilters. 'all' means no filter."""
    platform_value = validate_string_param(platform, ALLOWED_PLATFORMS)
    media_type_value = validate_string_param(media_type, ALLOWED_MEDIA_TYPES)

    return PostFilters(
        platform=platform_value if platform_value != "all" else None,
        media_type=media_type_value if media_type_value != "all" else None,
        start_date=validate_date_param(start_date),
        end_date=validate_date_param(end_date),
        sort_field=validate_string_param(sort_field, ALLOWED_POST_SORT_FIELDS) or DEFAULT_POST_SORT_FIELD,
        sort_order=validate_sort_order(sort_order),
        search=validate_string_param(search),
    )


# ============================================================================
# CREDENTIALS
# ============================================================================

def _is_missing(value: Any) -> bool:
    # Empty containers count as "present but wrong type", not missing
    if value is None or value is False:
        return True
    return isinstance(value, (str, int, float)) and not value


def validate_email(email: Any) -> Optional[str]:
    """Return None when valid, otherwise a message safe to show the user."""
    if _is_missing(email):
        return "Email is required"

    if not isinstance(email, str):
        return "Email must be a string"

    if not _EMAIL_RE.fullmatch(email.strip()):
        return "Invalid email format"

    return None


def validate_password(password: Any) -> Optional[str]:
    """Return None when valid, otherwise a message safe to show the user."""
    if _is_missing(password):
        return "Password is required"

    if not isinstance(password, str):
        return "Password must be a string"

    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters"

    # Upper bound keeps hashing cost bounded
    if len(password) > MAX_PASSWORD_LENGTH:
        return "Password is too long"

    return None


def validate_signup_credentials(email: Any, password: Any) -> Optional[str]:
    return validate_email(email) or validate_password(password)

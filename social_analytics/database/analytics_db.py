"""
Analytics Database Module - principal-scoped Supabase access

An AnalyticsStore is bound to one user. Row level security on the backend
already restricts rows to auth.uid(), but every query built here still adds an
explicit user_id filter, and inserts always take the owner from the store.
Both layers are kept.
"""

import logging
from typing import Any, Dict, List, Optional

from supabase import Client

from social_analytics.errors import BackendFailure
from social_analytics.schemas.analytics import PostFilters

logger = logging.getLogger(__name__)

POSTS_TABLE = "posts"
DAILY_METRICS_TABLE = "daily_metrics"
OWNER_COLUMN = "user_id"


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so `value` only matches itself."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class AnalyticsStore:
    """Storage handle for a single principal's posts and daily metrics"""

    def __init__(self, client: Client, user_id: str):
        if not user_id:
            raise ValueError("AnalyticsStore requires a user id")
        self.client = client
        self.user_id = user_id

    def _owned(self, table: str, columns: str = "*"):
        return self.client.table(table).select(columns).eq(OWNER_COLUMN, self.user_id)

    def _execute(self, query, public_message: str, context: str):
        try:
            return query.execute()
        except Exception as e:
            logger.error(f"❌ {context} failed for user {self.user_id}: {e}", exc_info=True)
            raise BackendFailure(public_message, cause=e) from e

    # ------------------------------------------------------------------
    # Posts
    # ------------------------------------------------------------------

    def list_posts(self, filters: Optional[PostFilters] = None) -> List[Dict[str, Any]]:
        filters = filters or PostFilters()
        query = self._owned(POSTS_TABLE)

        if filters.platform:
            query = query.eq("platform", filters.platform)
        if filters.media_type:
            query = query.eq("media_type", filters.media_type)
        if filters.start_date:
            query = query.gte("posted_at", filters.start_date)
        if filters.end_date:
            query = query.lte("posted_at", filters.end_date)
        if filters.search:
            query = query.ilike("caption", f"%{escape_like(filters.search)}%")

        query = query.order(filters.sort_field, desc=filters.sort_order == "desc")

        result = self._execute(query, "Failed to fetch posts", "Posts fetch")
        posts = result.data or []
        logger.info(f"📋 Fetched {len(posts)} post(s) for user {self.user_id}")
        return posts

    def list_all_posts(self) -> List[Dict[str, Any]]:
        """Every post the user owns, unfiltered, for the analytics summary."""
        result = self._execute(
            self._owned(POSTS_TABLE), "Failed to fetch analytics data", "Analytics posts fetch"
        )
        return result.data or []

    def get_post(self, post_id: str) -> Optional[Dict[str, Any]]:
        query = self._owned(POSTS_TABLE).eq("id", post_id).limit(1)
        result = self._execute(query, "Failed to fetch post", "Post fetch")
        if result.data:
            return result.data[0]
        return None

    def create_post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        record = {key: value for key, value in payload.items() if value is not None}
        record.pop("id", None)
        record[OWNER_COLUMN] = self.user_id

        query = self.client.table(POSTS_TABLE).insert(record)
        result = self._execute(query, "Failed to create post", "Post insert")
        if not result.data:
            raise BackendFailure("Failed to create post")

        logger.info(f"✅ Created post {result.data[0].get('id')} for user {self.user_id}")
        return result.data[0]

    def update_post(self, post_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Apply counter/rate changes. Returns None when the user owns no such post."""
        record = {key: value for key, value in changes.items() if key not in ("id", OWNER_COLUMN)}
        if not record:
            return self.get_post(post_id)

        query = (
            self.client.table(POSTS_TABLE)
            .update(record)
            .eq(OWNER_COLUMN, self.user_id)
            .eq("id", post_id)
        )
        result = self._execute(query, "Failed to update post", "Post update")
        if result.data:
            return result.data[0]
        return None

    def delete_post(self, post_id: str) -> bool:
        query = (
            self.client.table(POSTS_TABLE)
            .delete()
            .eq(OWNER_COLUMN, self.user_id)
            .eq("id", post_id)
        )
        result = self._execute(query, "Failed to delete post", "Post delete")
        deleted = bool(result.data)
        if deleted:
            logger.info(f"🗑️ Deleted post {post_id} for user {self.user_id}")
        return deleted

    # ------------------------------------------------------------------
    # Daily metrics
    # ------------------------------------------------------------------

    def list_daily_metrics(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        query = self._owned(DAILY_METRICS_TABLE).order("date", desc=False)

        if start_date:
            query = query.gte("date", start_date)
        if end_date:
            query = query.lte("date", end_date)

        result = self._execute(query, "Failed to fetch daily metrics", "Daily metrics fetch")
        return result.data or []

"""
Posts API endpoints
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query

from social_analytics.auth import get_analytics_store
from social_analytics.database.analytics_db import AnalyticsStore
from social_analytics.errors import BackendFailure
from social_analytics.responses import error_response, failure_response, success_response
from social_analytics.schemas.analytics import PostCreate, PostUpdate
from social_analytics.services.validation import build_post_filters

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["posts"])

POST_NOT_FOUND = "Post not found"


@router.get("")
def list_posts(
    platform: Optional[str] = Query(None),
    media_type: Optional[str] = Query(None, alias="mediaType"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    sort_field: Optional[str] = Query(None, alias="sortField"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    search: Optional[str] = Query(None),
    store: AnalyticsStore = Depends(get_analytics_store),
):
    """
    List the current user's posts.

    Every parameter is validated before use; anything invalid is dropped rather
    than rejected. The owner always comes from the session, never from the query.
    """
    filters = build_post_filters(
        platform=platform,
        media_type=media_type,
        start_date=start_date,
        end_date=end_date,
        sort_field=sort_field,
        sort_order=sort_order,
        search=search,
    )

    try:
        posts = store.list_posts(filters)
    except BackendFailure as e:
        return failure_response(e, "Failed to fetch posts")

    return success_response(posts)


@router.get("/{post_id}")
def get_post(post_id: str, store: AnalyticsStore = Depends(get_analytics_store)):
    try:
        post = store.get_post(post_id)
    except BackendFailure as e:
        return failure_response(e, "Failed to fetch post")

    if not post:
        return error_response(POST_NOT_FOUND, 404)
    return success_response(post)


@router.post("")
def create_post(
    payload: PostCreate = Body(...),
    store: AnalyticsStore = Depends(get_analytics_store),
):
    try:
        post = store.create_post(payload.model_dump(exclude_none=True))
    except BackendFailure as e:
        return failure_response(e, "Failed to create post")

    return success_response(post, status_code=201)


@router.patch("/{post_id}")
def update_post(
    post_id: str,
    payload: PostUpdate = Body(...),
    store: AnalyticsStore = Depends(get_analytics_store),
):
    try:
        post = store.update_post(post_id, payload.model_dump(exclude_unset=True))
    except BackendFailure as e:
        return failure_response(e, "Failed to update post")

    if not post:
        return error_response(POST_NOT_FOUND, 404)
    return success_response(post)


@router.delete("/{post_id}")
def delete_post(post_id: str, store: AnalyticsStore = Depends(get_analytics_store)):
    try:
        deleted = store.delete_post(post_id)
    except BackendFailure as e:
        return failure_response(e, "Failed to delete post")

    if not deleted:
        return error_response(POST_NOT_FOUND, 404)
    return success_response()

"""
Authentication utilities

Resolves the calling user from the session cookie (or a bearer token) and hands
out storage handles scoped to that user. Any failure to resolve the user is
treated as "not signed in".
"""

import logging
from typing import Optional

from fastapi import Cookie, Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel, Field
from supabase import create_client, Client

from social_analytics.config import Settings, get_settings
from social_analytics.database.analytics_db import AnalyticsStore
from social_analytics.errors import BackendFailure, LoginRequired, Unauthenticated

logger = logging.getLogger(__name__)

ACCESS_TOKEN_COOKIE = "sb-access-token"
LOGIN_PATH = "/auth/login"

# Security
security = HTTPBearer(auto_error=False)


class AuthenticatedUser(BaseModel):
    id: str
    email: Optional[str] = None
    created_at: Optional[str] = None
    access_token: str = Field(exclude=True, repr=False)


def isoformat_or_none(value) -> Optional[str]:
    if value is None:
        return None
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def get_supabase_client(settings: Settings = Depends(get_settings)) -> Client:
    """A fresh client per request so no auth state is shared between users."""
    try:
        return create_client(settings.supabase_url, settings.supabase_anon_key)
    except Exception as e:
        logger.error(f"❌ Could not create Supabase client: {e}")
        raise BackendFailure("Server configuration error", cause=e) from e


def get_auth_client(settings: Settings = Depends(get_settings)) -> Optional[Client]:
    """Client for the guards. None when it cannot be built, which reads as no principal."""
    try:
        return get_supabase_client(settings)
    except BackendFailure:
        return None


def extract_access_token(
    cookie_token: Optional[str],
    credentials: Optional[HTTPAuthorizationCredentials],
) -> Optional[str]:
    if cookie_token and cookie_token.strip():
        return cookie_token.strip()
    if credentials and credentials.credentials and credentials.credentials.strip():
        return credentials.credentials.strip()
    return None


def resolve_principal(client: Optional[Client], token: Optional[str]) -> AuthenticatedUser:
    """
    Verify the token with Supabase and return the user it belongs to.

    Raises Unauthenticated for a missing, expired or malformed token and for any
    error talking to the auth service, including having no client at all.
    """
    if not token or client is None:
        raise Unauthenticated()

    try:
        response = client.auth.get_user(token)
    except Exception as e:
        logger.info(f"🔍 Auth - Token verification failed: {type(e).__name__}")
        raise Unauthenticated() from e

    user = getattr(response, "user", None) if response else None
    if not user or not getattr(user, "id", None):
        logger.info("🔍 Auth - No user found for token")
        raise Unauthenticated()

    return AuthenticatedUser(
        id=str(user.id),
        email=getattr(user, "email", None),
        created_at=isoformat_or_none(getattr(user, "created_at", None)),
        access_token=token,
    )


def get_current_user(
    client: Optional[Client] = Depends(get_auth_client),
    cookie_token: Optional[str] = Cookie(default=None, alias=ACCESS_TOKEN_COOKIE),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthenticatedUser:
    """API guard. Failure surfaces as a bare 401."""
    return resolve_principal(client, extract_access_token(cookie_token, credentials))


def get_page_user(
    request: Request,
    client: Optional[Client] = Depends(get_auth_client),
    cookie_token: Optional[str] = Cookie(default=None, alias=ACCESS_TOKEN_COOKIE),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthenticatedUser:
    """Page guard. Failure surfaces as a redirect to the login page."""
    try:
        return resolve_principal(client, extract_access_token(cookie_token, credentials))
    except Unauthenticated as e:
        logger.info(f"🔍 Auth - Redirecting {request.url.path} to login")
        raise LoginRequired() from e


def get_analytics_store(
    current_user: AuthenticatedUser = Depends(get_current_user),
    client: Client = Depends(get_auth_client),
) -> AnalyticsStore:
    """
    Storage handle for the current user.

    The client sends the user's JWT so row level security applies, and the store
    adds an explicit user_id filter to every query on top of that.
    """
    client.postgrest.auth(current_user.access_token)
    return AnalyticsStore(client, current_user.id)

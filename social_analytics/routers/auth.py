"""
Auth API endpoints - login, signup, logout

Failure messages are deliberately generic: callers never learn whether an
email exists or which half of a credential pair was wrong.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Cookie, Depends
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials
from supabase import Client

from social_analytics.auth import (
    ACCESS_TOKEN_COOKIE,
    extract_access_token,
    get_supabase_client,
    security,
    isoformat_or_none,
)
from social_analytics.config import Settings, get_settings
from social_analytics.responses import error_response
from social_analytics.schemas.analytics import Credentials, SignupUserInfo, UserInfo
from social_analytics.services.validation import validate_email, validate_signup_credentials

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


def _set_session_cookie(response: JSONResponse, session: Any, settings: Settings) -> None:
    access_token = getattr(session, "access_token", None)
    if not access_token:
        return
    response.set_cookie(
        key=ACCESS_TOKEN_COOKIE,
        value=access_token,
        max_age=getattr(session, "expires_in", None),
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )


def _signup_error_message(error: Exception) -> str:
    """Map backend signup errors onto a small set of safe messages."""
    message = str(error)
    if "already registered" in message:
        return "An account with this email already exists"
    if "password" in message:
        return "Password does not meet requirements"
    if "email" in message:
        return "Invalid email address"
    return "Signup failed. Please try again."


@router.post("/login")
def login(
    credentials: Optional[Credentials] = Body(None),
    client: Client = Depends(get_supabase_client),
    settings: Settings = Depends(get_settings),
):
    credentials = credentials or Credentials()
    email = credentials.email
    password = credentials.password

    if not email or not password:
        return error_response("Email and password are required", 400)

    if validate_email(email):
        return error_response("Invalid email format", 400)

    if not isinstance(password, str) or not password.strip():
        return error_response("Password is required", 400)

    try:
        auth_response = client.auth.sign_in_with_password(
            {"email": email.strip().lower(), "password": password}
        )
    except Exception as e:
        # Detailed reason stays in the server log
        logger.warning(f"🔐 Login - Sign in rejected: {e}")
        return error_response(INVALID_CREDENTIALS_MESSAGE, 401)

    user = getattr(auth_response, "user", None)
    if not user:
        return error_response("Authentication failed", 401)

    user_info = UserInfo(id=str(user.id), email=user.email, created_at=isoformat_or_none(user.created_at))
    logger.info(f"🔐 Login - User {user_info.id} signed in")

    response = JSONResponse(content={"success": True, "user": user_info.model_dump()})
    _set_session_cookie(response, getattr(auth_response, "session", None), settings)
    return response


@router.post("/signup")
def signup(
    credentials: Optional[Credentials] = Body(None),
    client: Client = Depends(get_supabase_client),
    settings: Settings = Depends(get_settings),
):
    credentials = credentials or Credentials()
    validation_error = validate_signup_credentials(credentials.email, credentials.password)
    if validation_error:
        return error_response(validation_error, 400)

    try:
        auth_response = client.auth.sign_up({
            "email": credentials.email.strip().lower(),
            "password": credentials.password,
            "options": {"email_redirect_to": f"{settings.resolved_site_url}/auth/callback"},
        })
    except Exception as e:
        logger.error(f"❌ Signup - Supabase signup error: {e}")
        return error_response(_signup_error_message(e), 400)

    user = getattr(auth_response, "user", None)
    if not user:
        return error_response("Failed to create user", 500)

    session = getattr(auth_response, "session", None)
    email_confirmed_at = getattr(user, "email_confirmed_at", None)
    requires_email_confirmation = not session and email_confirmed_at is None

    user_info = SignupUserInfo(
        id=str(user.id),
        email=user.email,
        created_at=isoformat_or_none(user.created_at),
        email_confirmed_at=isoformat_or_none(email_confirmed_at),
    )
    logger.info(f"✅ Signup - Created user {user_info.id} (confirmation pending: {requires_email_confirmation})")

    response = JSONResponse(content={
        "success": True,
        "user": user_info.model_dump(),
        "session": {"expires_at": getattr(session, "expires_at", None)} if session else None,
        "requiresEmailConfirmation": requires_email_confirmation,
        "message": (
            "User created and signed in successfully!"
            if session
            else "User created. Please check your email to confirm your account before signing in."
        ),
    })
    if session:
        _set_session_cookie(response, session, settings)
    return response


@router.post("/logout")
def logout(
    client: Client = Depends(get_supabase_client),
    settings: Settings = Depends(get_settings),
    cookie_token: Optional[str] = Cookie(default=None, alias=ACCESS_TOKEN_COOKIE),
    bearer: Optional[HTTPAuthorizationCredentials] = Depends(security),
):
    """Idempotent: succeeds whether or not there is a session to end."""
    token = extract_access_token(cookie_token, bearer)

    if token:
        try:
            client.auth.admin.sign_out(token)
        except Exception as e:
            # Session may already be gone; the cookie is cleared either way
            logger.warning(f"🔐 Logout - Remote sign out failed: {e}")

    response = JSONResponse(content={"success": True})
    response.delete_cookie(
        ACCESS_TOKEN_COOKIE,
        path="/",
        secure=settings.session_cookie_secure,
        httponly=True,
        samesite="lax",
    )
    return response

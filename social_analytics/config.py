"""
Environment configuration

Values come from the process environment, optionally seeded from a .env file.
"""

import os
import logging
from functools import lru_cache
from typing import List, Optional
from urllib.parse import urlparse

from dotenv import load_dotenv
from pydantic import BaseModel

from social_analytics.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_SITE_URL = "http://localhost:3000"
MIN_ANON_KEY_LENGTH = 20


class Settings(BaseModel):
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    site_url: Optional[str] = None
    app_env: str = "production"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000
    session_cookie_secure: bool = True

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def resolved_site_url(self) -> str:
        return (self.site_url or DEFAULT_SITE_URL).rstrip("/")

    def validate_environment(self) -> List[str]:
        """Return a list of human readable problems, empty when the settings are usable."""
        problems = []

        if not self.supabase_url or not self.supabase_url.strip():
            problems.append("SUPABASE_URL is not set")
        elif not _is_http_url(self.supabase_url):
            problems.append("SUPABASE_URL must be a valid http or https URL")

        if not self.supabase_anon_key or not self.supabase_anon_key.strip():
            problems.append("SUPABASE_ANON_KEY is not set")
        elif len(self.supabase_anon_key) < MIN_ANON_KEY_LENGTH:
            problems.append("SUPABASE_ANON_KEY appears to be invalid")

        if self.site_url and not _is_http_url(self.site_url):
            problems.append("SITE_URL must be a valid http or https URL")

        return problems


def _is_http_url(value: str) -> bool:
    try:
        parsed = urlparse(value.strip())
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_settings() -> Settings:
    load_dotenv()

    port_raw = os.getenv("PORT", "8000")
    try:
        port = int(port_raw)
    except ValueError:
        raise ConfigError(f"PORT must be an integer, got {port_raw!r}")

    return Settings(
        supabase_url=os.getenv("SUPABASE_URL"),
        supabase_anon_key=os.getenv("SUPABASE_ANON_KEY"),
        site_url=os.getenv("SITE_URL") or None,
        app_env=(os.getenv("APP_ENV") or "production").strip().lower(),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        session_cookie_secure=_env_flag("SESSION_COOKIE_SECURE", True),
    )


def check_settings(settings: Settings) -> None:
    """
    Fail fast on bad configuration in production, warn in development.
    """
    problems = settings.validate_environment()
    if not problems:
        return

    if settings.is_development:
        for problem in problems:
            logger.warning(f"⚠️ Config - {problem}")
        return

    raise ConfigError("Invalid environment configuration: " + "; ".join(problems))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()

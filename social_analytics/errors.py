"""
Error types shared by the API layer
"""

from typing import Optional


class ConfigError(RuntimeError):
    """Raised when required environment configuration is missing or invalid."""


class Unauthenticated(Exception):
    """No valid principal could be resolved for the request."""


class LoginRequired(Unauthenticated):
    """Page-style variant of Unauthenticated, answered with a login redirect."""


class BackendFailure(RuntimeError):
    """Storage or auth backend was unreachable or returned an error."""

    def __init__(self, public_message: str, cause: Optional[BaseException] = None):
        super().__init__(public_message)
        self.public_message = public_message
        self.cause = cause


def sanitize_error(error: BaseException, generic_message: str, is_development: bool = False) -> str:
    """
    Return the message that is safe to show to an API caller.

    Detailed exception text is only exposed in development mode.
    """
    if is_development:
        detail = str(error.cause if isinstance(error, BackendFailure) and error.cause else error)
        return detail or generic_message
    return generic_message

"""
JSON response helpers shared by the routers
"""

from typing import Any

from fastapi.responses import JSONResponse

from social_analytics.config import get_settings
from social_analytics.errors import sanitize_error

UNAUTHORIZED_BODY = {"error": "Unauthorized"}


def success_response(data: Any = None, status_code: int = 200) -> JSONResponse:
    body = {"success": True}
    if data is not None:
        body["data"] = data
    return JSONResponse(status_code=status_code, content=body)


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def failure_response(error: BaseException, generic_message: str, status_code: int = 500) -> JSONResponse:
    """Error response whose text only carries exception detail in development."""
    message = sanitize_error(error, generic_message, get_settings().is_development)
    return error_response(message, status_code)


def unauthorized_response() -> JSONResponse:
    return JSONResponse(status_code=401, content=UNAUTHORIZED_BODY)

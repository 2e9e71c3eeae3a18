"""
FastAPI application for the social analytics dashboard API
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import RedirectResponse

from social_analytics import __version__
from social_analytics.auth import LOGIN_PATH
from social_analytics.config import Settings, check_settings, get_settings
from social_analytics.errors import BackendFailure, LoginRequired, Unauthenticated
from social_analytics.responses import error_response, failure_response, unauthorized_response
from social_analytics.routers import analytics, auth, daily_metrics, dashboard, posts

logger = logging.getLogger(__name__)

SERVICE_NAME = "Social Analytics Dashboard API"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(LoginRequired)
    async def login_required_handler(request: Request, exc: LoginRequired):
        return RedirectResponse(url=LOGIN_PATH, status_code=303)

    @app.exception_handler(Unauthenticated)
    async def unauthenticated_handler(request: Request, exc: Unauthenticated):
        return unauthorized_response()

    @app.exception_handler(BackendFailure)
    async def backend_failure_handler(request: Request, exc: BackendFailure):
        logger.error(f"❌ Backend failure on {request.url.path}: {exc.cause or exc}")
        return failure_response(exc, exc.public_message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.info(f"⚠️ Rejected request body on {request.url.path}: {exc.errors()}")
        return error_response("Invalid request body", 400)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"❌ Unhandled error on {request.url.path}: {exc}", exc_info=exc)
        return failure_response(exc, "An error occurred processing the request")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    check_settings(settings)

    app = FastAPI(title=SERVICE_NAME, version=__version__)
    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(posts.router)
    app.include_router(analytics.router)
    app.include_router(daily_metrics.router)
    app.include_router(dashboard.router)

    @app.get("/health")
    def health():
        """Health check endpoint"""
        return {"status": "healthy", "service": SERVICE_NAME, "version": __version__}

    logger.info(f"🚀 {SERVICE_NAME} ready (env: {settings.app_env})")
    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)
    app = create_app(settings)

    logger.info(f"🔌 Binding to {settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())

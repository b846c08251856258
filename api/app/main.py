# main.py

"""FastAPI application fronted by the origin access filter."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, get_settings

from .config.validate import validate_on_boot
from .middlewares import LoggingMiddleware, OriginAccessMiddleware, RequestIdMiddleware
from .obs import capture_exception, init_sentry
from .obs.cors import OriginObserver
from .obs.logging import configure_logging
from .routes_metrics import router as metrics_router
from .routes_version import router as version_router
from .utils.responses import error_response

logger = logging.getLogger("api")


def create_app(
    settings: Settings | None = None, observer: OriginObserver | None = None
) -> FastAPI:
    """Build the API with the origin filter ahead of every route."""

    settings = settings or get_settings()
    origins = validate_on_boot(settings)

    app = FastAPI(
        title="Food Order Gateway",
        version=settings.app_version,
        openapi_url="/openapi.json",
    )
    app.state.settings = settings

    # Added innermost first: RequestId -> Logging -> OriginAccess -> routes.
    app.add_middleware(
        OriginAccessMiddleware,
        allowed_origins=origins,
        observer=observer,
        health_path=settings.health_path,
        health_suffix=settings.health_suffix,
        app_version=settings.app_version,
        service_state=settings.service_state,
    )
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)

    app.include_router(version_router)
    app.include_router(metrics_router)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(
            exc.detail,
            extra={"status": exc.status_code, "route": request.url.path},
        )
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def general_error_handler(request: Request, exc: Exception):
        logger.exception(
            "unhandled_error", extra={"status": 500, "route": request.url.path}
        )
        capture_exception(exc, log_fallback=False, route=request.url.path)
        return error_response(500, "Internal Server Error")

    return app


_settings = get_settings()
configure_logging(getattr(logging, _settings.log_level.upper(), logging.INFO))
init_sentry(env=_settings.env)
app = create_app(_settings)

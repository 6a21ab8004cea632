"""Middleware registration."""

from fastapi import FastAPI

from sizemissions.config import Settings
from sizemissions.middleware.cors import setup_cors
from sizemissions.middleware.error_handler import setup_error_handlers
from sizemissions.middleware.logging import setup_logging
from sizemissions.middleware.rate_limit import RateLimitMiddleware
from sizemissions.middleware.request_id import RequestIdMiddleware


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register middleware. Starlette runs them in reverse-add order, so CORS goes last (outermost)."""
    setup_logging(settings)
    setup_error_handlers(app)
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_window=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
    app.add_middleware(RequestIdMiddleware)
    setup_cors(app, settings)

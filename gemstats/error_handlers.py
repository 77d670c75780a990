"""Global exception handlers.

GemstatsError subclasses become plain-text responses carrying their own
message and status; anything else is logged and answered with a bare 500.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse

from .errors import GemstatsError

logger = logging.getLogger("gemstats.errors")


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_gemstats_error_handler(app)
    _register_generic_error_handler(app)


def _register_gemstats_error_handler(app: FastAPI) -> None:

    @app.exception_handler(GemstatsError)
    async def gemstats_error_handler(request: Request, exc: GemstatsError):
        logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        return PlainTextResponse(exc.message, status_code=exc.http_status)


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all, never leaks internal details."""
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return PlainTextResponse(
            "An unexpected error occurred",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

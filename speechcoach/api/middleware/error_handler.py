"""
Global error handling for the FastAPI application.

Catches SpeechCoachError subclasses, request validation errors, and
unhandled exceptions, converting them into the ``{"error", "details"}``
JSON envelope the client expects.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from speechcoach.core.exceptions import PipelineError, SpeechCoachError
from speechcoach.core.models import ErrorResponse

logger = logging.getLogger(__name__)


def _envelope(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application.

    Registers three handlers in priority order:
    1. ``SpeechCoachError``: domain and pipeline errors with their own status.
    2. ``RequestValidationError``: malformed requests (400).
    3. ``Exception``: catch-all for unexpected server errors (500).

    Args:
        app: The FastAPI application instance to register handlers on.
    """

    @app.exception_handler(SpeechCoachError)
    async def speechcoach_error_handler(_request: Request, exc: SpeechCoachError) -> JSONResponse:
        """Convert domain-specific errors into the error envelope."""
        stage = exc.stage.value if isinstance(exc, PipelineError) else None
        logger.info("Request failed: code=%s stage=%s detail=%s", exc.code, stage, exc.detail)
        return _envelope(
            exc.status_code,
            ErrorResponse(error=exc.detail, details=exc.details, code=exc.code, stage=stage),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle malformed request bodies and parameters."""
        return _envelope(
            400,
            ErrorResponse(error="Invalid request", details=str(exc), code="VALIDATION_ERROR"),
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(_request: Request, exc: Exception) -> JSONResponse:
        """Catch-all handler; keeps stack traces from leaking to clients."""
        logger.exception("Unhandled error: %s", exc)
        return _envelope(500, ErrorResponse(error="Internal server error", code="INTERNAL_ERROR"))

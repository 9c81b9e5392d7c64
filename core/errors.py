"""Application-level error types and handlers."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import CORS_HEADERS

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """HTTP-facing error with explicit status, message and optional details."""

    def __init__(
        self,
        *,
        status_code: int,
        message: str,
        details: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details
        self.headers = headers


class EmptyDocumentError(ValueError):
    """Raised when asked to export a document with no content."""


class RemoteRenderError(RuntimeError):
    """Raised by the remote render client when the service call fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def build_error_response(
    *,
    message: str,
    status_code: int,
    details: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Builds the flat `{"error": ..., "details": ...}` envelope."""
    payload: dict[str, Any] = {"error": message}
    if details:
        payload["details"] = details
    return JSONResponse(status_code=status_code, content=payload, headers=headers)


async def service_error_handler(_: Request, exc: ServiceError) -> JSONResponse:
    """FastAPI exception handler for ServiceError."""
    return build_error_response(
        message=exc.message,
        status_code=exc.status_code,
        details=exc.details,
        headers=exc.headers,
    )


async def http_exception_handler(
    _: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Maps routing errors onto the render protocol's messages."""
    if exc.status_code == 404:
        return build_error_response(
            message="Not Found", details="Unsupported path", status_code=404
        )
    if exc.status_code == 405:
        return build_error_response(
            message="Method Not Allowed",
            details="Use POST for this endpoint",
            status_code=405,
            headers={"Allow": "POST"},
        )

    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return build_error_response(
        message=message, status_code=exc.status_code, headers=exc.headers
    )


async def validation_exception_handler(
    _: Request, exc: RequestValidationError
) -> JSONResponse:
    """Request validation errors are client errors in this protocol."""
    logger.debug("Request validation failed: %s", exc.errors())
    return build_error_response(message="Invalid request", status_code=400)


async def unhandled_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    """Fallback error handler for unexpected exceptions.

    Runs outside the app middleware stack, so CORS headers are set here.
    """
    logger.error("Unhandled error: %s", exc, exc_info=exc)
    return build_error_response(
        message="Internal server error", status_code=500, headers=CORS_HEADERS
    )

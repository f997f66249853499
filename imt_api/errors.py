"""
API Error Handling

Standardized error handling for the API.
"""

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from imt.schemas.errors import (
    CapacityError,
    IMTException,
    RangeError,
    StateError,
)
from imt_api.models.responses import ErrorDetail, ErrorResponse


logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=self.code,
                message=self.message,
                details=self.details,
            ),
        )


class InvalidRequestError(APIError):
    """Invalid request parameters."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code="INVALID_REQUEST",
            message=message,
            status_code=400,
            details=details,
        )


def status_for(exc: IMTException) -> int:
    """HTTP status for a library exception."""
    if isinstance(exc, (RangeError, CapacityError)):
        return 422
    if isinstance(exc, StateError):
        return 409
    return 400


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def imt_error_handler(request: Request, exc: IMTException) -> JSONResponse:
    """Handle library exceptions raised while serving a request."""
    error = exc.to_error_model()
    logger.info(f"{request.url.path}: {error.code}: {error.message}")
    return JSONResponse(
        status_code=status_for(exc),
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=error.code,
                message=error.message,
                details=error.details,
            ),
        ).model_dump(),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
                details={"type": type(exc).__name__},
            ),
        ).model_dump(),
    )

"""Error handlers for FastAPI exception handling.

Operation failures are normally returned as error results by the
advisor. These handlers cover anything that escapes a route, so the
process keeps serving and the caller still gets a readable body.

Error Response Schema:
{
    "error": {
        "code": "ERROR_CODE",
        "message": "Human-readable message",
        "type": "retriable|non_retriable",
        "provider": "multi-model-advisor",
        "details": {...}
    }
}
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from multi_model_advisor.core.exceptions import (
    AdvisorServiceError,
    BackendStatusError,
    BackendUnreachableError,
    ErrorCode,
    InvalidRequestError,
    MalformedResponseError,
    NonRetriableError,
    RetriableError,
)
from multi_model_advisor.core.logging import get_logger


PROVIDER = "multi-model-advisor"

logger = get_logger(__name__)


# =============================================================================
# Error Response Models (Pydantic)
# =============================================================================


class ErrorDetail(BaseModel):
    """Error detail schema.

    Attributes:
        code: Machine-readable error code.
        message: Human-readable error message.
        type: Error type (retriable or non_retriable).
        provider: Service that generated the error.
        details: Additional error-specific information.
    """

    code: str
    message: str
    type: str
    provider: str = PROVIDER
    details: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """Error response wrapper."""

    error: ErrorDetail


# =============================================================================
# Status Code Mapping
# =============================================================================


def get_status_code_for_error(error: Exception) -> int:
    """Determine HTTP status code based on exception type.

    Args:
        error: The exception to get status code for.

    Returns:
        Appropriate HTTP status code.
    """
    if isinstance(error, InvalidRequestError):
        return 400
    if isinstance(error, (BackendStatusError, MalformedResponseError)):
        return 502  # Bad Gateway
    if isinstance(error, BackendUnreachableError):
        return 503

    if isinstance(error, RetriableError):
        return 503
    if isinstance(error, NonRetriableError):
        return 500
    return 500


# =============================================================================
# Error Details Extraction
# =============================================================================


def extract_error_details(error: Exception) -> dict[str, Any]:
    """Extract additional details from exception attributes.

    Args:
        error: The exception to extract details from.

    Returns:
        Dictionary of error details.
    """
    known_attrs = [
        "backend_url",
        "status_code",
        "endpoint",
        "field",
        "value",
        "setting",
    ]

    details: dict[str, Any] = {}
    for attr in known_attrs:
        value = getattr(error, attr, None)
        if value is not None:
            details[attr] = value
    return details


# =============================================================================
# Error Response Builder
# =============================================================================


def build_error_response(
    error: Exception,
    error_type: str = "non_retriable",
) -> ErrorResponse:
    """Build a standardized error response.

    Args:
        error: The exception that occurred.
        error_type: Either "retriable" or "non_retriable".

    Returns:
        ErrorResponse with structured error information.
    """
    code = getattr(error, "error_code", ErrorCode.ADVISOR_ERROR.value)
    message = getattr(error, "message", str(error))
    details = extract_error_details(error)

    return ErrorResponse(
        error=ErrorDetail(
            code=code,
            message=message,
            type=error_type,
            details=details or None,
        )
    )


# =============================================================================
# Exception Handlers
# =============================================================================


async def advisor_error_handler(
    _request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle AdvisorServiceError and its subclasses.

    Retriable errors carry a Retry-After header.
    """
    if not isinstance(exc, AdvisorServiceError):
        return await generic_error_handler(_request, exc)

    headers: dict[str, str] | None = None
    error_type = "non_retriable"
    if isinstance(exc, RetriableError):
        error_type = "retriable"
        headers = {"Retry-After": str(max(exc.retry_after_ms // 1000, 1))}

    response = build_error_response(exc, error_type)
    return JSONResponse(
        status_code=get_status_code_for_error(exc),
        content=response.model_dump(),
        headers=headers,
    )


async def generic_error_handler(
    _request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle generic/unexpected exceptions with a 500."""
    logger.exception("Unhandled error", error=str(exc))
    response = ErrorResponse(
        error=ErrorDetail(
            code=ErrorCode.ADVISOR_ERROR.value,
            message=f"Internal server error: {exc!s}",
            type="non_retriable",
        )
    )

    return JSONResponse(
        status_code=500,
        content=response.model_dump(),
    )


# =============================================================================
# Handler Registration
# =============================================================================


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(AdvisorServiceError, advisor_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

"""Custom exceptions for multi-model-advisor.

All custom exceptions end in "Error" and carry a machine-readable code.

Exception Hierarchy:
    AdvisorServiceError (base)
    ├── RetriableError (transient errors)
    │   └── BackendUnreachableError
    └── NonRetriableError (permanent errors)
        ├── BackendStatusError
        ├── MalformedResponseError
        │   └── MalformedCatalogResponseError
        ├── InvalidRequestError
        └── ConfigurationError
"""

from __future__ import annotations

from enum import Enum
from typing import Any


# =============================================================================
# Error Codes Enum
# =============================================================================


class ErrorCode(str, Enum):
    """Error codes for multi-model-advisor exceptions.

    These codes provide a consistent way to identify error types
    across the API and in logging.
    """

    # Base error
    ADVISOR_ERROR = "ADVISOR_ERROR"

    # Retriable errors
    BACKEND_UNREACHABLE = "BACKEND_UNREACHABLE"

    # Non-retriable errors
    BACKEND_STATUS = "BACKEND_STATUS"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    MALFORMED_CATALOG_RESPONSE = "MALFORMED_CATALOG_RESPONSE"
    INVALID_REQUEST = "INVALID_REQUEST"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


# =============================================================================
# Base Exception
# =============================================================================


class AdvisorServiceError(Exception):
    """Base exception for all multi-model-advisor errors.

    Attributes:
        message: Human-readable error message.
        error_code: Machine-readable error code from ErrorCode enum.
    """

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.ADVISOR_ERROR,
        **kwargs: Any,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.
            error_code: Machine-readable error code.
            **kwargs: Additional attributes to set on the exception.
        """
        super().__init__(message)
        self.message = message
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )

        for key, value in kwargs.items():
            setattr(self, key, value)


# =============================================================================
# Retriable / Non-Retriable Bases
# =============================================================================


class RetriableError(AdvisorServiceError):
    """Base class for transient errors that may succeed on retry.

    The advisor never retries on its own; the hint is for callers.

    Attributes:
        retry_after_ms: Suggested retry delay in milliseconds.
    """

    def __init__(
        self,
        message: str,
        retry_after_ms: int = 1000,
        error_code: str | ErrorCode = ErrorCode.ADVISOR_ERROR,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_code, **kwargs)
        self.retry_after_ms = retry_after_ms


class NonRetriableError(AdvisorServiceError):
    """Base class for permanent errors that should not be retried."""

    pass


# =============================================================================
# Retriable Exceptions
# =============================================================================


class BackendUnreachableError(RetriableError):
    """The inference backend could not be contacted.

    Raised for connection failures, timeouts and other transport-level
    errors.

    Attributes:
        backend_url: Base URL that was being contacted.
    """

    def __init__(
        self,
        message: str,
        backend_url: str | None = None,
        retry_after_ms: int = 2000,
        **kwargs: Any,
    ) -> None:
        """Initialize BackendUnreachableError.

        Args:
            message: Error message.
            backend_url: Base URL of the backend.
            retry_after_ms: Suggested retry delay.
            **kwargs: Additional attributes.
        """
        super().__init__(
            message,
            retry_after_ms=retry_after_ms,
            error_code=ErrorCode.BACKEND_UNREACHABLE,
            **kwargs,
        )
        self.backend_url = backend_url


# =============================================================================
# Non-Retriable Exceptions
# =============================================================================


class BackendStatusError(NonRetriableError):
    """The backend answered with a non-success status or reported a failure.

    Attributes:
        status_code: HTTP status returned by the backend, if any.
        endpoint: Backend path that was called.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        endpoint: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message,
            error_code=ErrorCode.BACKEND_STATUS,
            **kwargs,
        )
        self.status_code = status_code
        self.endpoint = endpoint


class MalformedResponseError(NonRetriableError):
    """The backend body could not be decoded or lacks required fields.

    Attributes:
        endpoint: Backend path that was called.
    """

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        error_code: str | ErrorCode = ErrorCode.MALFORMED_RESPONSE,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_code=error_code, **kwargs)
        self.endpoint = endpoint


class MalformedCatalogResponseError(MalformedResponseError):
    """The model listing body is missing the expected ``models`` array."""

    def __init__(
        self,
        message: str,
        endpoint: str | None = "/api/tags",
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message,
            endpoint=endpoint,
            error_code=ErrorCode.MALFORMED_CATALOG_RESPONSE,
            **kwargs,
        )


class InvalidRequestError(NonRetriableError):
    """Caller input was rejected before any backend call was made.

    Attributes:
        field: Name of the invalid field.
        value: The invalid value.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        """Initialize InvalidRequestError.

        Args:
            message: Error message.
            field: Name of the invalid field.
            value: The invalid value.
            **kwargs: Additional attributes.
        """
        super().__init__(
            message,
            error_code=ErrorCode.INVALID_REQUEST,
            **kwargs,
        )
        self.field = field
        self.value = value


class ConfigurationError(NonRetriableError):
    """Service configuration is invalid.

    Attributes:
        setting: Name of the problematic setting.
    """

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message,
            error_code=ErrorCode.CONFIGURATION_ERROR,
            **kwargs,
        )
        self.setting = setting

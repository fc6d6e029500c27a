"""Application exception hierarchy.

All custom exceptions inherit from GatewayError.
Each exception has an error code for structured error handling.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error handling."""

    # General errors (1xxx)
    INTERNAL_ERROR = "GW-1000"
    CONFIGURATION_ERROR = "GW-1001"
    INVALID_INPUT = "GW-1002"

    # Provider errors (2xxx)
    PROVIDER_ERROR = "GW-2000"

    # Embedding errors (3xxx)
    EMBEDDING_SERVICE_ERROR = "GW-3000"
    EMBEDDING_DIMENSION_MISMATCH = "GW-3001"

    # Vector store errors (4xxx)
    VECTOR_STORE_ERROR = "GW-4000"

    # Upstream passthrough errors (5xxx)
    UPSTREAM_HTTP_ERROR = "GW-5000"
    UPSTREAM_UNAVAILABLE = "GW-5001"


class GatewayError(Exception):
    """Base exception for all gateway errors.

    Attributes:
        message: Human-readable error message, sent to the client.
        code: Structured error code.
        details: Additional error context, logged but never sent.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {"error": self.message}


class ConfigurationError(GatewayError):
    """Configuration or environment error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


class InvalidInputError(GatewayError):
    """Client sent a malformed or empty payload."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.INVALID_INPUT, details)


class ProviderError(GatewayError):
    """An external provider call failed."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.PROVIDER_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class EmbeddingError(ProviderError):
    """Embedding provider error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.EMBEDDING_SERVICE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class DimensionMismatchError(EmbeddingError):
    """Vectors in one batch have different lengths."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.EMBEDDING_DIMENSION_MISMATCH, details)


class VectorStoreError(ProviderError):
    """Vector store operation error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VECTOR_STORE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class UpstreamHTTPError(ProviderError):
    """A passthrough upstream answered with a non-success status.

    The upstream status code is relayed to the client unchanged.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.UPSTREAM_HTTP_ERROR, details)
        self.status_code = status_code

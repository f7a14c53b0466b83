"""
Schemas
File: errors.py

Purpose: Standard error taxonomy for the receipt codec.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the codec."""

    # Build & Encode Errors
    ENCODING_ERROR = "ENCODING_ERROR"

    # Parse Errors
    MALFORMED_TOKEN = "MALFORMED_TOKEN"
    UNSUPPORTED_VERSION = "UNSUPPORTED_VERSION"

    # Signature Errors
    INVALID_SIGNATURE = "INVALID_SIGNATURE"

    # Configuration Errors
    CONFIG_ERROR = "CONFIG_ERROR"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class ReceiptError(BaseModel):
    """
    Error model for structured error communication.

    Lets callers that relay tokens (e.g. a table service) report a codec
    failure without re-raising it.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.MALFORMED_TOKEN],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "ReceiptException":
        """Convert this error model to the matching exception."""
        exc_cls = _EXCEPTIONS_BY_CODE.get(self.code)
        if exc_cls is None:
            return ReceiptException(
                message=self.message,
                code=self.code,
                details=dict(self.details),
                retryable=self.retryable,
            )
        return exc_cls(self.message, details=dict(self.details))


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class ReceiptException(Exception):
    """
    Base exception for all receipt codec errors.

    This exception carries structured error information and can be
    converted to/from ReceiptError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "RECEIPT_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> ReceiptError:
        """Convert this exception to a ReceiptError model."""
        return ReceiptError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class EncodingError(ReceiptException):
    """Raised when a field value does not fit its declared width or schema."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.ENCODING_ERROR,
            details=full_details,
            retryable=False,
        )


class MalformedTokenError(ReceiptException):
    """Raised when a token has the wrong shape (segments, base64, chunk sizes)."""

    def __init__(
        self,
        message: str,
        segment_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if segment_index is not None:
            full_details["segment_index"] = segment_index
        super().__init__(
            message=message,
            code=ErrorCodes.MALFORMED_TOKEN,
            details=full_details,
            retryable=False,
        )


class UnsupportedVersionError(ReceiptException):
    """Raised when the header version marker is not supported."""

    def __init__(
        self,
        message: str,
        version: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if version is not None:
            full_details["version"] = version
        super().__init__(
            message=message,
            code=ErrorCodes.UNSUPPORTED_VERSION,
            details=full_details,
            retryable=False,
        )


class InvalidSignatureError(ReceiptException):
    """Raised when the signer cannot be recovered or does not match."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_SIGNATURE,
            details=details,
            retryable=False,
        )


class ConfigError(ReceiptException):
    """Raised when runtime configuration values are malformed."""

    def __init__(
        self,
        message: str,
        key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if key:
            full_details["key"] = key
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIG_ERROR,
            details=full_details,
            retryable=False,
        )


_EXCEPTIONS_BY_CODE: dict[str, type[ReceiptException]] = {
    ErrorCodes.ENCODING_ERROR: EncodingError,
    ErrorCodes.MALFORMED_TOKEN: MalformedTokenError,
    ErrorCodes.UNSUPPORTED_VERSION: UnsupportedVersionError,
    ErrorCodes.INVALID_SIGNATURE: InvalidSignatureError,
    ErrorCodes.CONFIG_ERROR: ConfigError,
}

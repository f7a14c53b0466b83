"""
Schemas

Purpose: Export version constants and the error taxonomy.
"""

# Version constants
from .versioning import (
    AMOUNT_SCALE,
    HEADER_SIZE,
    SUPPORTED_VERSION_MARKERS,
    TOKEN_SEPARATOR,
    VERSION_MARKER,
    WORD_SIZE,
    is_supported_version,
)

# Error models and exceptions
from .errors import (
    ConfigError,
    EncodingError,
    ErrorCodes,
    InvalidSignatureError,
    MalformedTokenError,
    ReceiptError,
    ReceiptException,
    UnsupportedVersionError,
)

__all__ = [
    "AMOUNT_SCALE",
    "HEADER_SIZE",
    "SUPPORTED_VERSION_MARKERS",
    "TOKEN_SEPARATOR",
    "VERSION_MARKER",
    "WORD_SIZE",
    "is_supported_version",
    "ConfigError",
    "EncodingError",
    "ErrorCodes",
    "InvalidSignatureError",
    "MalformedTokenError",
    "ReceiptError",
    "ReceiptException",
    "UnsupportedVersionError",
]

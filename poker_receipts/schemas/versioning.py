"""
Schemas
File: versioning.py

Purpose: Centralize wire-format version constants.
This file must remain tiny and have no imports from other schema files
to avoid circular dependencies.
"""

# Two bytes following the type tag in every token header
VERSION_MARKER: bytes = b"\x86\x0f"

# Supported markers for forward compatibility
SUPPORTED_VERSION_MARKERS: frozenset[bytes] = frozenset({VERSION_MARKER})

# Wire constants shared by the encoder and the parser
TOKEN_SEPARATOR: str = "."
HEADER_SIZE: int = 1 + len(VERSION_MARKER)
WORD_SIZE: int = 32

# Table amounts are carried in units of 10**9
AMOUNT_SCALE: int = 10**9


def is_supported_version(marker: bytes) -> bool:
    """Check if a header version marker is supported without raising."""
    return marker in SUPPORTED_VERSION_MARKERS

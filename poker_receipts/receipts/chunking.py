"""
Token Chunking

Wire representation of a signed receipt, independent of receipt kinds:

    b64(header) . b64(r) . b64(s) . b64(chunk0) . b64(chunk1) ...

The payload travels in 32-byte chunks with the recovery id in the first
byte of chunk0 (the byte that is zero in the signable payload). Only the
last chunk may be shorter, and only when the caller allows it.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Sequence

from poker_receipts.schemas.errors import MalformedTokenError
from poker_receipts.schemas.versioning import HEADER_SIZE, TOKEN_SEPARATOR, WORD_SIZE

# header, r, s and at least one payload chunk
MIN_SEGMENTS = 4
SIGNATURE_PART_SIZE = 32


@dataclass(frozen=True)
class TokenSegments:
    """Decoded byte segments of a token."""

    header: bytes
    r: bytes
    s: bytes
    chunks: tuple[bytes, ...]


def chunk_payload(payload: bytes, recovery_id: int) -> list[bytes]:
    """Split a signable payload into wire chunks, embedding the recovery id."""
    if not payload:
        raise ValueError("payload must not be empty")
    framed = bytes([recovery_id]) + payload[1:]
    return [framed[i:i + WORD_SIZE] for i in range(0, len(framed), WORD_SIZE)]


def unchunk_payload(
    chunks: Sequence[bytes],
    allow_short_tail: bool = False,
) -> tuple[int, bytes]:
    """
    Reassemble wire chunks into (recovery_id, signable payload).

    Raises:
        MalformedTokenError: If there are no chunks or a chunk has the wrong size
    """
    if not chunks:
        raise MalformedTokenError("Token carries no payload chunks")
    last = len(chunks) - 1
    for index, chunk in enumerate(chunks):
        if len(chunk) == WORD_SIZE:
            continue
        if index == last and index > 0 and allow_short_tail and 0 < len(chunk) < WORD_SIZE:
            continue
        raise MalformedTokenError(
            f"Payload chunk {index} is {len(chunk)} bytes, expected {WORD_SIZE}",
            segment_index=index + 3,
        )
    joined = b"".join(chunks)
    return joined[0], b"\x00" + joined[1:]


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def render_token(header: bytes, r: bytes, s: bytes, chunks: Sequence[bytes]) -> str:
    """Join header, signature parts and payload chunks into the textual token."""
    return TOKEN_SEPARATOR.join(_b64(part) for part in (header, r, s, *chunks))


def split_token(token: str) -> TokenSegments:
    """
    Split a token into decoded segments and check their fixed sizes.

    Raises:
        MalformedTokenError: On too few segments, invalid base64, or a header
                            or signature part with the wrong length
    """
    if not isinstance(token, str):
        raise MalformedTokenError(f"Token must be a string, got {type(token).__name__}")
    parts = token.split(TOKEN_SEPARATOR)
    if len(parts) < MIN_SEGMENTS:
        raise MalformedTokenError(
            f"Token has {len(parts)} segments, expected at least {MIN_SEGMENTS}",
        )

    decoded: list[bytes] = []
    for index, part in enumerate(parts):
        try:
            decoded.append(base64.b64decode(part, validate=True))
        except ValueError as e:
            raise MalformedTokenError(
                f"Segment {index} is not valid base64: {e}",
                segment_index=index,
            ) from e

    header, r, s = decoded[0], decoded[1], decoded[2]
    if len(header) != HEADER_SIZE:
        raise MalformedTokenError(
            f"Header is {len(header)} bytes, expected {HEADER_SIZE}",
            segment_index=0,
        )
    for index, part in ((1, r), (2, s)):
        if len(part) != SIGNATURE_PART_SIZE:
            raise MalformedTokenError(
                f"Signature segment {index} is {len(part)} bytes, expected {SIGNATURE_PART_SIZE}",
                segment_index=index,
            )
    return TokenSegments(header=header, r=r, s=s, chunks=tuple(decoded[3:]))


__all__ = [
    "TokenSegments",
    "chunk_payload",
    "unchunk_payload",
    "render_token",
    "split_token",
]

"""
Receipt Codec

Encode/sign and parse/verify entry points.

    sign:  record -> payload -> keccak256 -> (v, r, s) -> chunks -> token
    parse: token -> segments -> header check -> payload -> keccak256
           -> recover signer -> decode fields -> record

The header is not part of the digest; the signature covers the payload
with its first byte (the recovery id slot) zeroed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError

from poker_receipts.crypto.addresses import AddressLike, normalize_address
from poker_receipts.crypto.hashing import keccak256, to_hex
from poker_receipts.crypto.signatures import (
    PrivateKeyLike,
    RecoverableSignature,
    SignatureError,
    recover_address,
    sign_digest,
)
from poker_receipts.schemas.errors import (
    EncodingError,
    InvalidSignatureError,
    MalformedTokenError,
    ReceiptException,
    UnsupportedVersionError,
)
from poker_receipts.schemas.versioning import VERSION_MARKER, WORD_SIZE, is_supported_version

from .chunking import TokenSegments, chunk_payload, render_token, split_token, unchunk_payload
from .layout import LAYOUTS, Tail, check_payload_size, decode_payload, encode_payload
from .models import RECORD_TYPES, ReceiptRecord, ReceiptType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerifiedToken:
    """A token whose structure checked out and whose signer was recovered."""

    receipt_type: ReceiptType
    segments: TokenSegments
    signature: RecoverableSignature
    payload: bytes
    signer: str


# =============================================================================
# Encode / Sign
# =============================================================================

def encode(record: ReceiptRecord) -> bytes:
    """Signable payload bytes for a record."""
    return encode_payload(record)


def digest(record: ReceiptRecord) -> bytes:
    """Keccak-256 digest of the signable payload."""
    return keccak256(encode(record))


def sign(record: ReceiptRecord, private_key: PrivateKeyLike) -> str:
    """
    Sign a record and render its textual token.

    Raises:
        EncodingError: If a field does not fit or the private key is unusable
    """
    payload = encode(record)
    try:
        signature = sign_digest(keccak256(payload), private_key)
    except SignatureError as e:
        raise EncodingError(f"Cannot sign receipt: {e}", field_path="private_key") from e

    header = bytes([record.type]) + VERSION_MARKER
    token = render_token(
        header,
        signature.r_bytes,
        signature.s_bytes,
        chunk_payload(payload, signature.v),
    )
    logger.debug(f"Signed {record.type.name} receipt ({len(payload)} payload bytes)")
    return token


# =============================================================================
# Parse / Verify
# =============================================================================

def _header_type(header: bytes) -> ReceiptType:
    marker = header[1:]
    if not is_supported_version(marker):
        raise UnsupportedVersionError(
            f"Unsupported version marker 0x{marker.hex()}",
            version=to_hex(marker),
        )
    try:
        return ReceiptType(header[0])
    except ValueError as e:
        raise MalformedTokenError(
            f"Unknown receipt type tag {header[0]}",
            segment_index=0,
        ) from e


def verify_token(token: str) -> VerifiedToken:
    """
    Check a token's structure and recover its signer without decoding fields.

    Raises:
        MalformedTokenError: Wrong segment count, base64, sizes or header tag
        UnsupportedVersionError: Header version marker mismatch
        InvalidSignatureError: Bad recovery id or failed signer recovery
    """
    segments = split_token(token)
    receipt_type = _header_type(segments.header)
    layout = LAYOUTS[receipt_type]

    recovery_id, payload = unchunk_payload(
        segments.chunks,
        allow_short_tail=layout.tail is Tail.DATA,
    )
    check_payload_size(layout, len(payload))

    try:
        signature = RecoverableSignature.from_vrs(recovery_id, segments.r, segments.s)
        signer = recover_address(keccak256(payload), signature)
    except SignatureError as e:
        raise InvalidSignatureError(f"Invalid {receipt_type.name} signature: {e}") from e

    return VerifiedToken(
        receipt_type=receipt_type,
        segments=segments,
        signature=signature,
        payload=payload,
        signer=signer,
    )


def _rejected(token: str, exc: ReceiptException) -> None:
    logger.warning(f"Rejected receipt token [{exc.code}]: {exc.message} ({str(token)[:16]}...)")


def parse_to_params(token: str) -> list[str]:
    """
    Return the raw signable parameters of a token as 0x-hex strings.

    Default form is [r, s, chunk0, chunk1, ...] with chunks as on the wire
    (recovery id in the first byte). SETTLE receipts use the packed form
    [v||r||s, word0, word1] with the recovery id slot zeroed.
    """
    try:
        verified = verify_token(token)
    except ReceiptException as e:
        _rejected(token, e)
        raise

    if LAYOUTS[verified.receipt_type].packed_params:
        payload = verified.payload
        words = [payload[i:i + WORD_SIZE] for i in range(0, len(payload), WORD_SIZE)]
        return [to_hex(verified.signature.to_bytes())] + [to_hex(w) for w in words]

    segments = verified.segments
    return [to_hex(segments.r), to_hex(segments.s)] + [to_hex(c) for c in segments.chunks]


def parse(token: str, expected_signer: Optional[AddressLike] = None) -> ReceiptRecord:
    """
    Parse and verify a token into its typed record with ``signer`` set.

    Args:
        token: Textual token as produced by sign()
        expected_signer: If given, the recovered signer must match it

    Raises:
        MalformedTokenError, UnsupportedVersionError, InvalidSignatureError
    """
    expected = None
    if expected_signer is not None:
        try:
            expected = normalize_address(expected_signer)
        except ValueError as e:
            raise EncodingError(str(e), field_path="expected_signer") from e

    try:
        verified = verify_token(token)
        if expected is not None and verified.signer != expected:
            raise InvalidSignatureError(
                f"Receipt signed by {verified.signer}, expected {expected}",
                details={"signer": verified.signer, "expected": expected},
            )
        values = decode_payload(verified.receipt_type, verified.payload)
        try:
            record = RECORD_TYPES[verified.receipt_type](signer=verified.signer, **values)
        except ValidationError as e:
            raise MalformedTokenError(f"Decoded fields failed validation: {e}") from e
    except ReceiptException as e:
        _rejected(token, e)
        raise

    logger.debug(f"Parsed {record.type.name} receipt signed by {record.signer}")
    return record


def recover_signer(token: str) -> str:
    """Recovered signer address of a token."""
    try:
        return verify_token(token).signer
    except ReceiptException as e:
        _rejected(token, e)
        raise


__all__ = [
    "VerifiedToken",
    "encode",
    "digest",
    "sign",
    "verify_token",
    "parse_to_params",
    "parse",
    "recover_signer",
]

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from eth_keys import keys
from eth_keys.exceptions import BadSignature
from eth_utils import ValidationError

from .hashing import to_hex

# secp256k1 group order
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

# Offset between the wire recovery id (27/28) and the raw parity bit
RECOVERY_ID_OFFSET = 27

PrivateKeyLike = Union[str, bytes]


class SignatureError(ValueError):
    """Raised when a signature cannot be produced or recovered."""


@dataclass(frozen=True)
class RecoverableSignature:
    """secp256k1 signature from which the signer's address can be recovered."""

    v: int
    r: int
    s: int

    def __post_init__(self) -> None:
        if self.v not in (RECOVERY_ID_OFFSET, RECOVERY_ID_OFFSET + 1):
            raise SignatureError(f"Recovery id must be 27 or 28, got {self.v}")
        if not 0 < self.r < SECP256K1_N:
            raise SignatureError("Signature r is out of range")
        if not 0 < self.s < SECP256K1_N:
            raise SignatureError("Signature s is out of range")

    @classmethod
    def from_vrs(cls, v: int, r: bytes, s: bytes) -> "RecoverableSignature":
        return cls(v=v, r=int.from_bytes(r, "big"), s=int.from_bytes(s, "big"))

    @property
    def r_bytes(self) -> bytes:
        return self.r.to_bytes(32, "big")

    @property
    def s_bytes(self) -> bytes:
        return self.s.to_bytes(32, "big")

    def to_bytes(self) -> bytes:
        """Packed v||r||s (65 bytes)."""
        return bytes([self.v]) + self.r_bytes + self.s_bytes


def _private_key(private_key: PrivateKeyLike) -> keys.PrivateKey:
    if isinstance(private_key, str):
        hex_content = private_key[2:] if private_key.startswith("0x") else private_key
        try:
            raw = bytes.fromhex(hex_content)
        except ValueError as e:
            raise SignatureError(f"Private key is not valid hex: {e}") from e
    else:
        raw = bytes(private_key)
    if len(raw) != 32:
        raise SignatureError(f"Private key must be 32 bytes, got {len(raw)}")
    if not 0 < int.from_bytes(raw, "big") < SECP256K1_N:
        raise SignatureError("Private key is out of range")
    try:
        return keys.PrivateKey(raw)
    except (ValidationError, ValueError) as e:
        raise SignatureError(f"Invalid private key: {e}") from e


def sign_digest(digest: bytes, private_key: PrivateKeyLike) -> RecoverableSignature:
    """Sign a 32-byte digest deterministically (RFC 6979, low-s)."""
    if len(digest) != 32:
        raise SignatureError(f"Digest must be 32 bytes, got {len(digest)}")
    signature = _private_key(private_key).sign_msg_hash(digest)
    return RecoverableSignature(
        v=signature.v + RECOVERY_ID_OFFSET,
        r=signature.r,
        s=signature.s,
    )


def recover_address(digest: bytes, signature: RecoverableSignature) -> str:
    """
    Recover the lowercase signer address from a digest and signature.

    Raises:
        SignatureError: If r is not an x-coordinate on the curve, or the
                       recovered key is degenerate
    """
    try:
        eth_signature = keys.Signature(
            vrs=(signature.v - RECOVERY_ID_OFFSET, signature.r, signature.s)
        )
        public_key = eth_signature.recover_public_key_from_msg_hash(digest)
    except (BadSignature, ValidationError) as e:
        raise SignatureError(f"Signature recovery failed: {e}") from e
    return to_hex(public_key.to_canonical_address())


def address_of(private_key: PrivateKeyLike) -> str:
    """Lowercase address controlled by a private key."""
    return to_hex(_private_key(private_key).public_key.to_canonical_address())


__all__ = [
    "RecoverableSignature",
    "SignatureError",
    "PrivateKeyLike",
    "RECOVERY_ID_OFFSET",
    "sign_digest",
    "recover_address",
    "address_of",
]

"""
Core cryptographic utilities.

Keccak-256 hashing, address helpers and recoverable secp256k1 signatures.
"""
from .addresses import (
    ADDRESS_SIZE,
    address_to_bytes,
    normalize_address,
)
from .hashing import (
    keccak256,
    to_hex,
    from_hex,
)
from .signatures import (
    RecoverableSignature,
    SignatureError,
    address_of,
    recover_address,
    sign_digest,
)

__all__ = [
    "ADDRESS_SIZE",
    "address_to_bytes",
    "normalize_address",
    "keccak256",
    "to_hex",
    "from_hex",
    "RecoverableSignature",
    "SignatureError",
    "address_of",
    "recover_address",
    "sign_digest",
]

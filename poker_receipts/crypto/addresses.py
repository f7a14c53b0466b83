"""
Address helpers.

Receipts carry 20-byte account addresses. They are accepted in any valid
hex form (lowercase or EIP-55 checksummed) and always emitted lowercase.
"""
from __future__ import annotations

from typing import Union

from eth_utils import (
    is_address,
    is_checksum_address,
    is_checksum_formatted_address,
    to_canonical_address,
    to_normalized_address,
)

ADDRESS_SIZE = 20

AddressLike = Union[str, bytes]


def normalize_address(value: AddressLike) -> str:
    """
    Return the lowercase 0x-prefixed form of an address.

    Raises:
        ValueError: If value is not a syntactically valid 20-byte address
                   (including a mixed-case string with a bad checksum)
    """
    if isinstance(value, (bytes, bytearray)):
        if len(value) != ADDRESS_SIZE:
            raise ValueError(f"Address must be {ADDRESS_SIZE} bytes, got {len(value)}")
        return "0x" + bytes(value).hex()
    if not isinstance(value, str) or not is_address(value):
        raise ValueError(f"Invalid address: {value!r}")
    if is_checksum_formatted_address(value) and not is_checksum_address(value):
        raise ValueError(f"Address has an invalid EIP-55 checksum: {value}")
    return to_normalized_address(value)


def address_to_bytes(value: AddressLike) -> bytes:
    """Return the 20 raw bytes of an address."""
    return to_canonical_address(normalize_address(value))


__all__ = [
    "ADDRESS_SIZE",
    "AddressLike",
    "normalize_address",
    "address_to_bytes",
]

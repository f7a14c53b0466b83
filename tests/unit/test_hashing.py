"""
Hashing and Address Unit Tests
Tests for poker_receipts/crypto/hashing.py and addresses.py

Tests:
- keccak256 known values (differs from NIST SHA3-256)
- to_hex/from_hex round trip and prefix handling
- address normalization and checksum rejection
"""
import hashlib

import pytest
from eth_utils import to_checksum_address

from poker_receipts.crypto.addresses import address_to_bytes, normalize_address
from poker_receipts.crypto.hashing import from_hex, keccak256, to_hex


class TestKeccak256:
    """Tests for keccak256()."""

    def test_empty_input(self):
        """Test keccak256 of empty bytes matches the well-known digest."""
        assert keccak256(b"").hex() == (
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )

    def test_not_sha3(self):
        """Test keccak256 is not the standardized SHA3-256."""
        assert keccak256(b"") != hashlib.sha3_256(b"").digest()

    def test_length_and_determinism(self):
        """Test output is 32 bytes and stable."""
        assert len(keccak256(b"receipt")) == 32
        assert keccak256(b"receipt") == keccak256(b"receipt")
        assert keccak256(b"receipt") != keccak256(b"receipT")


class TestHexHelpers:
    """Tests for to_hex() and from_hex()."""

    def test_round_trip(self):
        data = bytes(range(16))
        assert from_hex(to_hex(data)) == data

    def test_to_hex_prefix(self):
        assert to_hex(b"\xde\xad") == "0xdead"
        assert to_hex(b"") == "0x"

    def test_from_hex_requires_prefix(self):
        with pytest.raises(ValueError, match="0x"):
            from_hex("deadbeef")

    def test_from_hex_odd_length(self):
        with pytest.raises(ValueError, match="even length"):
            from_hex("0xabc")

    def test_from_hex_invalid_characters(self):
        with pytest.raises(ValueError, match="Invalid hex"):
            from_hex("0xzz")


class TestAddresses:
    """Tests for address normalization."""

    ADDR = "0x82e8c6cf42c8d1ff9594b17a3f50e94a12cc860f"

    def test_lowercases_checksummed(self):
        """Test an EIP-55 address normalizes to lowercase."""
        assert normalize_address(to_checksum_address(self.ADDR)) == self.ADDR

    def test_accepts_raw_bytes(self):
        raw = bytes.fromhex(self.ADDR[2:])
        assert normalize_address(raw) == self.ADDR
        assert address_to_bytes(self.ADDR) == raw

    def test_rejects_bad_checksum(self):
        """Test mixed case with a wrong checksum is rejected."""
        checksummed = to_checksum_address(self.ADDR)
        with pytest.raises(ValueError):
            normalize_address("0x" + checksummed[2:].swapcase())

    @pytest.mark.parametrize("value", [
        "0x1234",
        "not an address",
        b"\x00" * 19,
        12345,
    ])
    def test_rejects_invalid(self, value):
        with pytest.raises(ValueError):
            normalize_address(value)

    def test_checksum_casing_accepted(self):
        """Test valid EIP-55, all-lowercase and all-uppercase forms are accepted."""
        for value in (to_checksum_address(self.ADDR), self.ADDR, "0x" + self.ADDR[2:].upper()):
            assert normalize_address(value) == self.ADDR

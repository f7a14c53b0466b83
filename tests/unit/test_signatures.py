"""
Signature Unit Tests
Tests for poker_receipts/crypto/signatures.py

Tests:
- address derivation from a private key
- deterministic signing and signer recovery
- RecoverableSignature range checks
- rejection of unusable keys and unrecoverable signatures
"""
import base64

import pytest

from poker_receipts.crypto.hashing import keccak256
from poker_receipts.crypto.signatures import (
    RecoverableSignature,
    SignatureError,
    address_of,
    recover_address,
    SECP256K1_N,
    sign_digest,
)

from fixtures.vectors import ADDR, PRIV, TAMPERED_LEAVE_TOKEN


class TestAddressOf:
    """Tests for address_of()."""

    def test_known_key(self):
        assert address_of(PRIV) == ADDR

    def test_accepts_unprefixed_hex_and_bytes(self):
        assert address_of(PRIV[2:]) == ADDR
        assert address_of(bytes.fromhex(PRIV[2:])) == ADDR

    @pytest.mark.parametrize("key", [
        "0x1234",
        "0xnothex",
        "0x" + "00" * 32,
        SECP256K1_N.to_bytes(32, "big"),
    ])
    def test_rejects_unusable_keys(self, key):
        with pytest.raises(SignatureError):
            address_of(key)


class TestSignAndRecover:
    """Tests for sign_digest() and recover_address()."""

    def test_recovers_signer(self):
        digest = keccak256(b"some payload")
        signature = sign_digest(digest, PRIV)

        assert signature.v in (27, 28)
        assert recover_address(digest, signature) == ADDR

    def test_signing_is_deterministic(self):
        """Test RFC 6979 nonces give identical signatures."""
        digest = keccak256(b"some payload")
        assert sign_digest(digest, PRIV) == sign_digest(digest, PRIV)

    def test_low_s(self):
        signature = sign_digest(keccak256(b"x"), PRIV)
        assert signature.s <= SECP256K1_N // 2

    def test_other_digest_recovers_other_address(self):
        signature = sign_digest(keccak256(b"a"), PRIV)
        assert recover_address(keccak256(b"b"), signature) != ADDR

    def test_digest_must_be_32_bytes(self):
        with pytest.raises(SignatureError, match="32 bytes"):
            sign_digest(b"short", PRIV)

    def test_r_off_curve_fails_recovery(self):
        """Test an r that is not an x-coordinate on the curve cannot recover."""
        r = base64.b64decode(TAMPERED_LEAVE_TOKEN.split(".")[1])
        signature = RecoverableSignature.from_vrs(28, r, b"\x01" * 32)
        with pytest.raises(SignatureError):
            recover_address(keccak256(b"payload"), signature)


class TestRecoverableSignature:
    """Tests for RecoverableSignature validation and packing."""

    def test_packed_bytes(self):
        signature = RecoverableSignature(v=27, r=1, s=2)
        packed = signature.to_bytes()

        assert len(packed) == 65
        assert packed[0] == 27
        assert packed[1:33] == (1).to_bytes(32, "big")
        assert packed[33:] == (2).to_bytes(32, "big")

    def test_from_vrs(self):
        signature = RecoverableSignature.from_vrs(28, b"\x00" * 31 + b"\x05", b"\x00" * 31 + b"\x06")
        assert (signature.v, signature.r, signature.s) == (28, 5, 6)

    @pytest.mark.parametrize("v", [0, 1, 26, 29, 255])
    def test_rejects_recovery_id(self, v):
        with pytest.raises(SignatureError, match="27 or 28"):
            RecoverableSignature(v=v, r=1, s=1)

    @pytest.mark.parametrize("r,s", [(0, 1), (1, 0), (SECP256K1_N, 1), (1, SECP256K1_N)])
    def test_rejects_out_of_range(self, r, s):
        with pytest.raises(SignatureError, match="out of range"):
            RecoverableSignature(v=27, r=r, s=s)

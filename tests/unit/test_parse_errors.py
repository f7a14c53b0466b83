"""
Parse Rejection Tests
Tests for poker_receipts/receipts/codec.py error paths

Tests:
- tampered signatures and payloads
- header version and type tag checks
- payload size checks per receipt kind
- expected signer mismatch
- rejection logging
"""
import base64
import logging

import pytest

from poker_receipts import parse, parse_to_params, recover_signer
from poker_receipts.receipts.chunking import split_token
from poker_receipts.receipts.codec import verify_token
from poker_receipts.schemas.errors import (
    EncodingError,
    ErrorCodes,
    InvalidSignatureError,
    MalformedTokenError,
    UnsupportedVersionError,
)

from fixtures import resign_segments
from fixtures.vectors import (
    ADDR,
    BET_TOKEN,
    DIST_TOKEN,
    FORWARD_TOKEN,
    LEAVE_TOKEN,
    MESSAGE_TOKEN,
    OTHER_ADDR,
    SETTLE_TOKEN,
    TAMPERED_LEAVE_TOKEN,
)


def _with_header(token: str, header: bytes) -> str:
    parts = token.split(".")
    parts[0] = base64.b64encode(header).decode()
    return ".".join(parts)


class TestSignatureRejection:
    """Signatures that do not check out."""

    def test_tampered_vector(self):
        with pytest.raises(InvalidSignatureError) as exc_info:
            parse(TAMPERED_LEAVE_TOKEN)
        assert exc_info.value.code == ErrorCodes.INVALID_SIGNATURE

    @pytest.mark.parametrize("v", [0, 1, 26, 29])
    def test_bad_recovery_id(self, v):
        segments = split_token(LEAVE_TOKEN)
        chunk0 = bytes([v]) + segments.chunks[0][1:]
        with pytest.raises(InvalidSignatureError, match="27 or 28"):
            parse(resign_segments(segments, chunks=(chunk0,)))

    def test_flipped_recovery_id_changes_signer(self):
        segments = split_token(LEAVE_TOKEN)
        chunk0 = bytes([segments.chunks[0][0] ^ 0x07]) + segments.chunks[0][1:]
        token = resign_segments(segments, chunks=(chunk0,))
        try:
            record = parse(token)
        except InvalidSignatureError:
            return
        assert record.signer != ADDR

    def test_flipped_payload_byte_changes_signer(self):
        """Test a modified hand id is not attributed to the original signer."""
        segments = split_token(LEAVE_TOKEN)
        chunk0 = bytearray(segments.chunks[0])
        chunk0[11] ^= 0x01
        token = resign_segments(segments, chunks=(bytes(chunk0),))
        with pytest.raises(InvalidSignatureError):
            parse(token, expected_signer=ADDR)

    def test_zero_r_rejected(self):
        segments = split_token(LEAVE_TOKEN)
        with pytest.raises(InvalidSignatureError):
            parse(resign_segments(segments, r=b"\x00" * 32))

    def test_expected_signer_mismatch(self):
        with pytest.raises(InvalidSignatureError) as exc_info:
            parse(LEAVE_TOKEN, expected_signer=OTHER_ADDR)
        assert exc_info.value.details == {"signer": ADDR, "expected": OTHER_ADDR}

    def test_expected_signer_invalid(self):
        with pytest.raises(EncodingError):
            parse(LEAVE_TOKEN, expected_signer="0x1234")


class TestHeaderRejection:
    """Header version and type tag."""

    def test_version_mismatch(self):
        token = _with_header(LEAVE_TOKEN, b"\x01\x86\x10")
        with pytest.raises(UnsupportedVersionError) as exc_info:
            parse(token)
        assert exc_info.value.details["version"] == "0x8610"

    def test_version_checked_before_tag(self):
        token = _with_header(LEAVE_TOKEN, b"\x03\x00\x00")
        with pytest.raises(UnsupportedVersionError):
            parse(token)

    @pytest.mark.parametrize("tag", [0, 3, 99, 255])
    def test_unknown_tag(self, tag):
        token = _with_header(LEAVE_TOKEN, bytes([tag]) + b"\x86\x0f")
        with pytest.raises(MalformedTokenError, match="tag") as exc_info:
            parse(token)
        assert exc_info.value.details["segment_index"] == 0

    def test_header_kind_must_match_payload(self):
        """Test a BET token relabelled as FOLD fails the payload tag check."""
        token = _with_header(BET_TOKEN, b"\x07\x86\x0f")
        with pytest.raises((MalformedTokenError, InvalidSignatureError)):
            parse(token)


class TestSizeRejection:
    """Chunk counts that do not fit the receipt kind."""

    def test_missing_chunk(self):
        token = DIST_TOKEN.rsplit(".", 1)[0]
        with pytest.raises(MalformedTokenError, match="at least"):
            parse(token)

    def test_extra_chunk(self):
        token = LEAVE_TOKEN + "." + base64.b64encode(b"\x00" * 32).decode()
        with pytest.raises(MalformedTokenError, match="exactly"):
            parse(token)

    def test_short_tail_only_for_forward(self):
        token = MESSAGE_TOKEN + "." + base64.b64encode(b"\x00" * 4).decode()
        with pytest.raises(MalformedTokenError):
            parse(token)

    def test_forward_short_tail_accepted(self):
        assert parse(FORWARD_TOKEN).data == "0x11223344"

    def test_too_few_segments(self):
        with pytest.raises(MalformedTokenError):
            parse("AYYP.abc")

    def test_invalid_base64(self):
        with pytest.raises(MalformedTokenError):
            parse(LEAVE_TOKEN.replace("+", "-"))

    def test_parse_to_params_rejects_too(self):
        with pytest.raises(MalformedTokenError):
            parse_to_params(SETTLE_TOKEN.rsplit(".", 1)[0])


class TestRejectionLogging:
    """Rejected tokens are logged at WARNING."""

    def test_warning_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="poker_receipts"):
            with pytest.raises(InvalidSignatureError):
                parse(TAMPERED_LEAVE_TOKEN)

        assert any(
            record.levelno == logging.WARNING and ErrorCodes.INVALID_SIGNATURE in record.getMessage()
            for record in caplog.records
        )

    def test_recover_signer_logs_rejection(self, caplog):
        with caplog.at_level(logging.WARNING, logger="poker_receipts"):
            with pytest.raises(MalformedTokenError):
                recover_signer("AYYP.abc")

        assert any(
            ErrorCodes.MALFORMED_TOKEN in record.getMessage() for record in caplog.records
        )

    def test_verify_token_does_not_log(self, caplog):
        with caplog.at_level(logging.WARNING, logger="poker_receipts"):
            with pytest.raises(InvalidSignatureError):
                verify_token(TAMPERED_LEAVE_TOKEN)
        assert not caplog.records

"""
Receipt Field Layouts

The field-schema table: for every receipt kind, the ordered fields that
follow the one-byte recovery id in the payload, with their byte widths.
Encoding and decoding both walk the same table, so the two directions
cannot drift apart.

All integers are big-endian. Table amounts are stored divided by
AMOUNT_SCALE; signed amounts use two's complement within their width.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional
from uuid import UUID

from poker_receipts.crypto.addresses import address_to_bytes
from poker_receipts.crypto.hashing import to_hex
from poker_receipts.schemas.errors import EncodingError, MalformedTokenError
from poker_receipts.schemas.versioning import AMOUNT_SCALE, WORD_SIZE

from .models import ReceiptRecord, ReceiptType


DIST_CAPACITY = 6
SETTLE_CAPACITY = 10
AMOUNT_WIDTH = 6
OUT_INDEX_WIDTH = 1


class FieldKind(str, Enum):
    SUBJECT = "subject"
    TAG = "tag"
    UINT = "uint"
    AMOUNT = "amount"
    ADDRESS = "address"
    UUID = "uuid"
    PAD = "pad"
    OUTS = "outs"
    SIGNED_AMOUNTS = "signed_amounts"
    TEXT_LENGTH = "text_length"


class Tail(str, Enum):
    """Variable-length content appended after the fixed words."""

    TEXT = "text"
    DATA = "data"


@dataclass(frozen=True)
class FieldSpec:
    name: Optional[str]
    kind: FieldKind
    width: int


@dataclass(frozen=True)
class Layout:
    receipt_type: ReceiptType
    fields: tuple[FieldSpec, ...]
    tail: Optional[Tail] = None
    tail_field: Optional[str] = None
    # parse_to_params emits v||r||s followed by the zeroed payload words
    packed_params: bool = False

    @property
    def fixed_size(self) -> int:
        """Bytes before the tail, including the recovery id byte."""
        return 1 + sum(spec.width for spec in self.fields)

    @property
    def word_count(self) -> int:
        return self.fixed_size // WORD_SIZE


def _f(name: Optional[str], kind: FieldKind, width: int) -> FieldSpec:
    return FieldSpec(name=name, kind=kind, width=width)


def _pad(width: int) -> FieldSpec:
    return FieldSpec(name=None, kind=FieldKind.PAD, width=width)


def _subject(width: int) -> FieldSpec:
    return FieldSpec(name="subject_addr", kind=FieldKind.SUBJECT, width=width)


_TABLE_AMOUNT_FIELDS = (
    _subject(3),
    _f("hand_id", FieldKind.UINT, 4),
    _f(None, FieldKind.TAG, 1),
    _f("amount", FieldKind.AMOUNT, AMOUNT_WIDTH),
    _pad(17),
)

_NONCE_ADDRESS_FIELDS = (
    _subject(7),
    _f("nonce", FieldKind.UINT, 4),
    _f("new_signer_addr", FieldKind.ADDRESS, 20),
)

LAYOUTS: dict[ReceiptType, Layout] = {
    ReceiptType.LEAVE: Layout(
        ReceiptType.LEAVE,
        (
            _subject(7),
            _f("hand_id", FieldKind.UINT, 4),
            _f("leaver_addr", FieldKind.ADDRESS, 20),
        ),
    ),
    ReceiptType.BET: Layout(ReceiptType.BET, _TABLE_AMOUNT_FIELDS),
    ReceiptType.FOLD: Layout(ReceiptType.FOLD, _TABLE_AMOUNT_FIELDS),
    ReceiptType.DIST: Layout(
        ReceiptType.DIST,
        (
            _subject(3),
            _f("hand_id", FieldKind.UINT, 4),
            _f(None, FieldKind.TAG, 1),
            _f("claim_id", FieldKind.UINT, 1),
            _f("outs", FieldKind.OUTS, 1 + DIST_CAPACITY * (OUT_INDEX_WIDTH + AMOUNT_WIDTH)),
            _pad(11),
        ),
    ),
    ReceiptType.SETTLE: Layout(
        ReceiptType.SETTLE,
        (
            _subject(1),
            _f("hands_netted", FieldKind.UINT, 1),
            _f("lhn_byte", FieldKind.UINT, 1),
            _f("amounts", FieldKind.SIGNED_AMOUNTS, SETTLE_CAPACITY * AMOUNT_WIDTH),
        ),
        packed_params=True,
    ),
    ReceiptType.CREATE_CONF: Layout(
        ReceiptType.CREATE_CONF,
        (
            _f("created", FieldKind.UINT, 4),
            _f("account_id", FieldKind.UUID, 16),
            _pad(11),
        ),
    ),
    ReceiptType.RESET_CONF: Layout(
        ReceiptType.RESET_CONF,
        (
            _f("created", FieldKind.UINT, 4),
            _f("account_id", FieldKind.UUID, 16),
            _pad(23),
            _f("old_signer_addr", FieldKind.ADDRESS, 20),
        ),
    ),
    ReceiptType.UNLOCK_REQUEST: Layout(
        ReceiptType.UNLOCK_REQUEST,
        (
            _f("created", FieldKind.UINT, 4),
            _pad(7),
            _f("new_owner", FieldKind.ADDRESS, 20),
        ),
    ),
    ReceiptType.FORWARD: Layout(
        ReceiptType.FORWARD,
        (
            _subject(7),
            _f("nonce", FieldKind.UINT, 4),
            _f("destination_addr", FieldKind.ADDRESS, 20),
            _f("amount", FieldKind.UINT, WORD_SIZE),
        ),
        tail=Tail.DATA,
        tail_field="data",
    ),
    ReceiptType.MESSAGE: Layout(
        ReceiptType.MESSAGE,
        (
            _f("created", FieldKind.UINT, 7),
            _f("table_addr", FieldKind.ADDRESS, 20),
            _f("message", FieldKind.TEXT_LENGTH, 4),
        ),
        tail=Tail.TEXT,
        tail_field="message",
    ),
    ReceiptType.RECOVERY: Layout(ReceiptType.RECOVERY, _NONCE_ADDRESS_FIELDS),
    ReceiptType.UNLOCK: Layout(
        ReceiptType.UNLOCK,
        (
            _subject(11),
            _f("new_owner", FieldKind.ADDRESS, 20),
        ),
    ),
}

for _layout in LAYOUTS.values():
    if _layout.fixed_size % WORD_SIZE:
        raise ValueError(f"{_layout.receipt_type.name} layout is not word aligned")


# =============================================================================
# Encoding
# =============================================================================

def _to_unsigned(value: int, width: int, field_path: str) -> bytes:
    try:
        return value.to_bytes(width, "big", signed=False)
    except OverflowError as e:
        raise EncodingError(
            f"{field_path}={value} does not fit in {width} unsigned bytes",
            field_path=field_path,
        ) from e


def _to_signed(value: int, width: int, field_path: str) -> bytes:
    try:
        return value.to_bytes(width, "big", signed=True)
    except OverflowError as e:
        raise EncodingError(
            f"{field_path}={value} does not fit in {width} signed bytes",
            field_path=field_path,
        ) from e


def _scale(value: int, field_path: str) -> int:
    if value % AMOUNT_SCALE:
        raise EncodingError(
            f"{field_path}={value} is not a multiple of {AMOUNT_SCALE}",
            field_path=field_path,
        )
    return value // AMOUNT_SCALE


def _encode_outs(outs: list[int], width: int) -> bytes:
    if len(outs) > DIST_CAPACITY:
        raise EncodingError(
            f"outs has {len(outs)} entries, capacity is {DIST_CAPACITY}",
            field_path="outs",
        )
    block = bytearray()
    count = 0
    for index, amount in enumerate(outs):
        if amount == 0:
            continue
        path = f"outs[{index}]"
        block += _to_unsigned(index, OUT_INDEX_WIDTH, path)
        block += _to_unsigned(_scale(amount, path), AMOUNT_WIDTH, path)
        count += 1
    return (bytes([count]) + bytes(block)).ljust(width, b"\x00")


def _encode_signed_amounts(amounts: list[int], width: int) -> bytes:
    capacity = width // AMOUNT_WIDTH
    if len(amounts) > capacity:
        raise EncodingError(
            f"amounts has {len(amounts)} entries, capacity is {capacity}",
            field_path="amounts",
        )
    block = bytearray()
    for index, amount in enumerate(amounts):
        path = f"amounts[{index}]"
        block += _to_signed(_scale(amount, path), AMOUNT_WIDTH, path)
    return bytes(block).ljust(width, b"\x00")


def _encode_tail(layout: Layout, record: ReceiptRecord) -> bytes:
    if layout.tail is Tail.TEXT:
        return getattr(record, layout.tail_field).encode("utf-8")
    if layout.tail is Tail.DATA:
        return record.data_bytes
    return b""


def _encode_field(spec: FieldSpec, record: ReceiptRecord, tail: bytes) -> bytes:
    kind = spec.kind
    if kind is FieldKind.PAD:
        return b"\x00" * spec.width
    if kind is FieldKind.TAG:
        return bytes([record.type])
    if kind is FieldKind.TEXT_LENGTH:
        return _to_unsigned(len(tail), spec.width, spec.name)

    value = getattr(record, spec.name)
    if value is None:
        raise EncodingError(
            f"{spec.name} is required for {record.type.name} receipts",
            field_path=spec.name,
        )
    if kind is FieldKind.SUBJECT:
        return address_to_bytes(value)[-spec.width:]
    if kind is FieldKind.UINT:
        return _to_unsigned(value, spec.width, spec.name)
    if kind is FieldKind.AMOUNT:
        return _to_unsigned(_scale(value, spec.name), spec.width, spec.name)
    if kind is FieldKind.ADDRESS:
        return address_to_bytes(value)
    if kind is FieldKind.UUID:
        return UUID(value).bytes
    if kind is FieldKind.OUTS:
        return _encode_outs(value, spec.width)
    if kind is FieldKind.SIGNED_AMOUNTS:
        return _encode_signed_amounts(value, spec.width)
    raise AssertionError(f"unhandled field kind {kind}")


def encode_payload(record: ReceiptRecord) -> bytes:
    """
    Serialize a record into its signable payload.

    Byte 0 (the slot the recovery id occupies on the wire) is zero.

    Raises:
        EncodingError: If a value is missing or does not fit its field
    """
    layout = LAYOUTS[record.type]
    tail = _encode_tail(layout, record)
    payload = bytearray(b"\x00")
    for spec in layout.fields:
        payload += _encode_field(spec, record, tail)
    if layout.tail is Tail.TEXT and len(tail) % WORD_SIZE:
        tail = tail.ljust(len(tail) + WORD_SIZE - len(tail) % WORD_SIZE, b"\x00")
    return bytes(payload) + tail


# =============================================================================
# Decoding
# =============================================================================

def check_payload_size(layout: Layout, size: int) -> None:
    """Reject payloads whose length cannot belong to the layout."""
    if size < layout.fixed_size:
        raise MalformedTokenError(
            f"{layout.receipt_type.name} payload is {size} bytes, "
            f"expected at least {layout.fixed_size}",
        )
    extra = size - layout.fixed_size
    if layout.tail is None and extra:
        raise MalformedTokenError(
            f"{layout.receipt_type.name} payload is {size} bytes, "
            f"expected exactly {layout.fixed_size}",
        )
    if layout.tail is Tail.TEXT and extra % WORD_SIZE:
        raise MalformedTokenError(
            f"{layout.receipt_type.name} text is not padded to {WORD_SIZE}-byte words",
        )


def _require_zero(raw: bytes, what: str) -> None:
    if any(raw):
        raise MalformedTokenError(f"Non-zero padding in {what}")


def _decode_outs(raw: bytes) -> list[int]:
    count = raw[0]
    if count > DIST_CAPACITY:
        raise MalformedTokenError(f"outs count {count} exceeds capacity {DIST_CAPACITY}")
    pair_width = OUT_INDEX_WIDTH + AMOUNT_WIDTH
    _require_zero(raw[1 + count * pair_width:], "outs")

    outs: list[int] = []
    for n in range(count):
        start = 1 + n * pair_width
        index = raw[start]
        if index >= DIST_CAPACITY or index < len(outs):
            raise MalformedTokenError(f"outs index {index} is out of order or range")
        amount = int.from_bytes(raw[start + 1:start + pair_width], "big")
        outs.extend([0] * (index - len(outs)))
        outs.append(amount * AMOUNT_SCALE)
    return outs


def _decode_signed_amounts(raw: bytes) -> list[int]:
    return [
        int.from_bytes(raw[i:i + AMOUNT_WIDTH], "big", signed=True) * AMOUNT_SCALE
        for i in range(0, len(raw), AMOUNT_WIDTH)
    ]


def _decode_text(tail: bytes, length: int) -> str:
    padded = -(-length // WORD_SIZE) * WORD_SIZE
    if len(tail) != padded:
        raise MalformedTokenError(
            f"Message declares {length} bytes but carries {len(tail)} padded bytes",
        )
    _require_zero(tail[length:], "message")
    try:
        return tail[:length].decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedTokenError(f"Message is not valid UTF-8: {e}") from e


def decode_payload(receipt_type: ReceiptType, payload: bytes) -> dict[str, Any]:
    """
    Decode a payload (recovery id byte included) into record field values.

    The subject address is not recoverable and is left out.

    Raises:
        MalformedTokenError: If sizes, padding, tags or text do not check out
    """
    layout = LAYOUTS[receipt_type]
    check_payload_size(layout, len(payload))

    values: dict[str, Any] = {}
    text_length = 0
    pos = 1
    for spec in layout.fields:
        raw = payload[pos:pos + spec.width]
        pos += spec.width
        kind = spec.kind
        if kind is FieldKind.SUBJECT:
            continue
        if kind is FieldKind.PAD:
            _require_zero(raw, receipt_type.name)
        elif kind is FieldKind.TAG:
            if raw[0] != receipt_type:
                raise MalformedTokenError(
                    f"Payload tag {raw[0]} does not match header tag {int(receipt_type)}",
                )
        elif kind is FieldKind.UINT:
            values[spec.name] = int.from_bytes(raw, "big")
        elif kind is FieldKind.AMOUNT:
            values[spec.name] = int.from_bytes(raw, "big") * AMOUNT_SCALE
        elif kind is FieldKind.ADDRESS:
            values[spec.name] = to_hex(raw)
        elif kind is FieldKind.UUID:
            values[spec.name] = str(UUID(bytes=raw))
        elif kind is FieldKind.OUTS:
            values[spec.name] = _decode_outs(raw)
        elif kind is FieldKind.SIGNED_AMOUNTS:
            values[spec.name] = _decode_signed_amounts(raw)
        elif kind is FieldKind.TEXT_LENGTH:
            text_length = int.from_bytes(raw, "big")

    tail = payload[layout.fixed_size:]
    if layout.tail is Tail.TEXT:
        values[layout.tail_field] = _decode_text(tail, text_length)
    elif layout.tail is Tail.DATA:
        values[layout.tail_field] = to_hex(tail)
    return values


__all__ = [
    "DIST_CAPACITY",
    "SETTLE_CAPACITY",
    "AMOUNT_WIDTH",
    "FieldKind",
    "FieldSpec",
    "Layout",
    "Tail",
    "LAYOUTS",
    "encode_payload",
    "decode_payload",
    "check_payload_size",
]

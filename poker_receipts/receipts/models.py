"""
Receipt Models

Typed records for every receipt kind. A record is built once, signed once
and never mutated; parsing a token yields the same record type with the
recovered ``signer`` filled in.

Key Design Principles:
1. One model per kind, dispatched through the ``type`` tag
2. ``subject_addr`` is construction context only (partly emitted, never decoded)
3. Attribute names are snake_case; ``to_dict()`` emits the camelCase wire names
"""

from __future__ import annotations

from enum import IntEnum
from typing import Annotated, Any, Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from poker_receipts.crypto.addresses import normalize_address
from poker_receipts.crypto.hashing import from_hex, to_hex


class ReceiptType(IntEnum):
    """One-byte type tag carried in the token header."""

    LEAVE = 1
    BET = 2
    FOLD = 7
    CREATE_CONF = 10
    RESET_CONF = 11
    UNLOCK_REQUEST = 12
    DIST = 21
    SETTLE = 25
    RECOVERY = 30
    UNLOCK = 31
    MESSAGE = 41
    FORWARD = 51


def _optional_address(value: Any) -> Any:
    return None if value is None else normalize_address(value)


Address = Annotated[str, BeforeValidator(normalize_address)]
OptionalAddress = Annotated[Optional[str], BeforeValidator(_optional_address)]
NonNegativeInt = Annotated[int, Field(ge=0)]


class ReceiptRecord(BaseModel):
    """
    Base record shared by all receipt kinds.

    Width limits are enforced by the field layout at build/encode time,
    not here; the model only checks types and syntax.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    type: ReceiptType
    subject_addr: OptionalAddress = Field(
        default=None,
        exclude=True,
        description="Context address (table, controller or target); not decoded",
    )
    signer: OptionalAddress = Field(
        default=None,
        description="Recovered signer address (set by the parser)",
    )

    def to_dict(self) -> dict[str, Any]:
        """Wire-named view of the record (as returned by parsers in other stacks)."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def encode(self) -> bytes:
        """Signable payload bytes."""
        from .codec import encode

        return encode(self)

    def digest(self) -> bytes:
        """Keccak-256 digest the signature is over."""
        from .codec import digest

        return digest(self)

    def sign(self, private_key: Union[str, bytes]) -> str:
        """Sign and render the textual token."""
        from .codec import sign

        return sign(self, private_key)


class LeaveReceipt(ReceiptRecord):
    """A player leaves the table after the given hand."""

    type: Literal[ReceiptType.LEAVE] = ReceiptType.LEAVE
    hand_id: NonNegativeInt
    leaver_addr: Address


class BetReceipt(ReceiptRecord):
    type: Literal[ReceiptType.BET] = ReceiptType.BET
    hand_id: NonNegativeInt
    amount: NonNegativeInt


class FoldReceipt(ReceiptRecord):
    type: Literal[ReceiptType.FOLD] = ReceiptType.FOLD
    hand_id: NonNegativeInt
    amount: NonNegativeInt


class DistReceipt(ReceiptRecord):
    """
    Pot distribution for a hand.

    ``outs`` holds the payout per seat. Decoding returns the list up to the
    last non-zero seat.
    """

    type: Literal[ReceiptType.DIST] = ReceiptType.DIST
    hand_id: NonNegativeInt
    claim_id: NonNegativeInt
    outs: list[NonNegativeInt] = Field(default_factory=list)


class SettleReceipt(ReceiptRecord):
    """Net balance changes over ``hands_netted`` hands since ``lhn_byte``."""

    type: Literal[ReceiptType.SETTLE] = ReceiptType.SETTLE
    lhn_byte: NonNegativeInt
    hands_netted: NonNegativeInt
    amounts: list[int] = Field(default_factory=list)


class CreateConfReceipt(ReceiptRecord):
    type: Literal[ReceiptType.CREATE_CONF] = ReceiptType.CREATE_CONF
    account_id: str
    created: NonNegativeInt

    @field_validator("account_id", mode="before")
    @classmethod
    def _normalize_account_id(cls, value: Any) -> str:
        return _normalize_uuid(value)


class ResetConfReceipt(ReceiptRecord):
    type: Literal[ReceiptType.RESET_CONF] = ReceiptType.RESET_CONF
    account_id: str
    created: NonNegativeInt
    old_signer_addr: Address

    @field_validator("account_id", mode="before")
    @classmethod
    def _normalize_account_id(cls, value: Any) -> str:
        return _normalize_uuid(value)


class UnlockRequestReceipt(ReceiptRecord):
    type: Literal[ReceiptType.UNLOCK_REQUEST] = ReceiptType.UNLOCK_REQUEST
    created: NonNegativeInt
    new_owner: Address


class ForwardReceipt(ReceiptRecord):
    """
    Call forwarded through an account controller.

    ``amount`` is in raw units (not scaled); ``data`` is 0x-prefixed hex.
    """

    type: Literal[ReceiptType.FORWARD] = ReceiptType.FORWARD
    nonce: NonNegativeInt
    destination_addr: Address
    amount: NonNegativeInt
    data: str = "0x"

    @field_validator("data", mode="before")
    @classmethod
    def _normalize_data(cls, value: Any) -> str:
        if isinstance(value, (bytes, bytearray)):
            return to_hex(bytes(value))
        if isinstance(value, str):
            return to_hex(from_hex(value.lower()))
        raise ValueError(f"data must be bytes or 0x-prefixed hex, got {type(value).__name__}")

    @property
    def data_bytes(self) -> bytes:
        return from_hex(self.data)


class MessageReceipt(ReceiptRecord):
    """Chat message posted to a table; ``created`` is in milliseconds."""

    type: Literal[ReceiptType.MESSAGE] = ReceiptType.MESSAGE
    created: NonNegativeInt
    table_addr: Address
    message: str

    @field_validator("message")
    @classmethod
    def _check_encodable(cls, value: str) -> str:
        # lone surrogates cannot be carried
        value.encode("utf-8")
        return value


class RecoveryReceipt(ReceiptRecord):
    type: Literal[ReceiptType.RECOVERY] = ReceiptType.RECOVERY
    nonce: NonNegativeInt
    new_signer_addr: Address


class UnlockReceipt(ReceiptRecord):
    type: Literal[ReceiptType.UNLOCK] = ReceiptType.UNLOCK
    new_owner: Address


def _normalize_uuid(value: Any) -> str:
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, str):
        return str(UUID(value))
    raise ValueError(f"account_id must be a UUID, got {type(value).__name__}")


RECORD_TYPES: dict[ReceiptType, type[ReceiptRecord]] = {
    ReceiptType.LEAVE: LeaveReceipt,
    ReceiptType.BET: BetReceipt,
    ReceiptType.FOLD: FoldReceipt,
    ReceiptType.DIST: DistReceipt,
    ReceiptType.SETTLE: SettleReceipt,
    ReceiptType.CREATE_CONF: CreateConfReceipt,
    ReceiptType.RESET_CONF: ResetConfReceipt,
    ReceiptType.UNLOCK_REQUEST: UnlockRequestReceipt,
    ReceiptType.FORWARD: ForwardReceipt,
    ReceiptType.MESSAGE: MessageReceipt,
    ReceiptType.RECOVERY: RecoveryReceipt,
    ReceiptType.UNLOCK: UnlockReceipt,
}

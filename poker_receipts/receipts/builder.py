"""
Receipt Builder

Constructs validated, unsigned receipt records from call parameters.

Usage:
    builder = ReceiptBuilder(table_addr)
    token = builder.bet(hand_id=77, amount=50 * 10**12).sign(private_key)

Every method validates its record against the field layout before
returning it, so width and capacity violations surface at build time.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Iterable, Optional, Union
from uuid import UUID

from pydantic import ValidationError

from poker_receipts.config.runtime import RuntimeConfig, get_default_config
from poker_receipts.crypto.addresses import AddressLike, normalize_address
from poker_receipts.schemas.errors import EncodingError

from .layout import DIST_CAPACITY, SETTLE_CAPACITY, encode_payload
from .models import (
    BetReceipt,
    CreateConfReceipt,
    DistReceipt,
    FoldReceipt,
    ForwardReceipt,
    LeaveReceipt,
    MessageReceipt,
    ReceiptRecord,
    ReceiptType,
    RecoveryReceipt,
    ResetConfReceipt,
    SettleReceipt,
    UnlockReceipt,
    UnlockRequestReceipt,
)

logger = logging.getLogger(__name__)


class ReceiptBuilder:
    """
    Builds receipts concerning one subject address.

    The subject is the table for hand receipts, the controller for
    forwards and the target account for recovery/unlock.
    """

    def __init__(
        self,
        subject_addr: Optional[AddressLike] = None,
        config: Optional[RuntimeConfig] = None,
    ) -> None:
        if subject_addr is not None:
            try:
                subject_addr = normalize_address(subject_addr)
            except ValueError as e:
                raise EncodingError(str(e), field_path="subject_addr") from e
        self.subject_addr: Optional[str] = subject_addr
        self._config = config

    @property
    def config(self) -> RuntimeConfig:
        return self._config or get_default_config()

    # -------------------------------------------------------------------------
    # Table receipts
    # -------------------------------------------------------------------------

    def leave(self, hand_id: int, leaver_addr: AddressLike) -> LeaveReceipt:
        return self._build(LeaveReceipt, hand_id=hand_id, leaver_addr=leaver_addr)

    def bet(self, hand_id: int, amount: int) -> BetReceipt:
        return self._build(BetReceipt, hand_id=hand_id, amount=amount)

    def fold(self, hand_id: int, amount: int) -> FoldReceipt:
        return self._build(FoldReceipt, hand_id=hand_id, amount=amount)

    def dist(self, hand_id: int, claim_id: int, outs: Iterable[int] = ()) -> DistReceipt:
        """Pot distribution; at most DIST_CAPACITY seats, missing seats pay zero."""
        outs = list(outs)
        if len(outs) > DIST_CAPACITY:
            raise EncodingError(
                f"outs has {len(outs)} entries, capacity is {DIST_CAPACITY}",
                field_path="outs",
            )
        return self._build(DistReceipt, hand_id=hand_id, claim_id=claim_id, outs=outs)

    def settle(
        self,
        lhn_byte: int,
        last_hand_id: int,
        amounts: Iterable[int] = (),
    ) -> SettleReceipt:
        """
        Net settlement from hand ``lhn_byte`` up to ``last_hand_id``.

        ``hands_netted`` is the difference of the two and must fit a byte;
        ``amounts`` is zero-filled to SETTLE_CAPACITY entries.
        """
        hands_netted = last_hand_id - lhn_byte
        if not 0 <= hands_netted <= 0xFF:
            raise EncodingError(
                f"hands_netted={hands_netted} does not fit in one byte",
                field_path="hands_netted",
            )
        amounts = list(amounts)
        if len(amounts) > SETTLE_CAPACITY:
            raise EncodingError(
                f"amounts has {len(amounts)} entries, capacity is {SETTLE_CAPACITY}",
                field_path="amounts",
            )
        amounts += [0] * (SETTLE_CAPACITY - len(amounts))
        return self._build(
            SettleReceipt,
            lhn_byte=lhn_byte,
            hands_netted=hands_netted,
            amounts=amounts,
        )

    def message(self, text: str, created: int) -> MessageReceipt:
        """Table chat message; ``created`` is in milliseconds."""
        try:
            size = len(text.encode("utf-8"))
        except (AttributeError, UnicodeEncodeError) as e:
            raise EncodingError(f"message is not encodable text: {e}", field_path="message") from e
        limit = self.config.codec.max_message_bytes
        if limit is not None and size > limit:
            raise EncodingError(
                f"message is {size} bytes, limit is {limit}",
                field_path="message",
            )
        return self._build(
            MessageReceipt,
            created=created,
            table_addr=self._require_subject("table_addr"),
            message=text,
        )

    # -------------------------------------------------------------------------
    # Account receipts
    # -------------------------------------------------------------------------

    def create_conf(self, account_id: Union[str, UUID], created: int) -> CreateConfReceipt:
        return self._build(CreateConfReceipt, account_id=account_id, created=created)

    def reset_conf(
        self,
        account_id: Union[str, UUID],
        old_signer_addr: AddressLike,
        created: Optional[int] = None,
    ) -> ResetConfReceipt:
        return self._build(
            ResetConfReceipt,
            account_id=account_id,
            old_signer_addr=old_signer_addr,
            created=self._now() if created is None else created,
        )

    def unlock_request(self, new_owner: AddressLike, created: Optional[int] = None) -> UnlockRequestReceipt:
        return self._build(
            UnlockRequestReceipt,
            new_owner=new_owner,
            created=self._now() if created is None else created,
        )

    def forward(
        self,
        nonce: int,
        destination_addr: AddressLike,
        amount: int,
        data: Union[str, bytes] = b"",
    ) -> ForwardReceipt:
        """Call forwarded by the subject controller; ``amount`` is in raw units."""
        record = self._build(
            ForwardReceipt,
            nonce=nonce,
            destination_addr=destination_addr,
            amount=amount,
            data=data,
        )
        limit = self.config.codec.max_data_bytes
        if limit is not None and len(record.data_bytes) > limit:
            raise EncodingError(
                f"data is {len(record.data_bytes)} bytes, limit is {limit}",
                field_path="data",
            )
        return record

    def recover(self, nonce: int, new_signer_addr: AddressLike) -> RecoveryReceipt:
        return self._build(RecoveryReceipt, nonce=nonce, new_signer_addr=new_signer_addr)

    def unlock(self, new_owner: AddressLike) -> UnlockReceipt:
        return self._build(UnlockReceipt, new_owner=new_owner)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _now(self) -> int:
        fixed = self.config.codec.fixed_timestamp
        return int(time.time()) if fixed is None else fixed

    def _require_subject(self, field_path: str) -> str:
        if self.subject_addr is None:
            raise EncodingError("A subject address is required for this receipt", field_path=field_path)
        return self.subject_addr

    def _build(self, model: type[ReceiptRecord], **fields: Any) -> ReceiptRecord:
        try:
            record = model(subject_addr=self.subject_addr, **fields)
        except ValidationError as e:
            errors = e.errors()
            field_path = ".".join(str(part) for part in errors[0]["loc"]) if errors else None
            raise EncodingError(
                f"Invalid {model.__name__} fields: {e}",
                field_path=field_path,
                details={"errors": [err["msg"] for err in errors]},
            ) from e
        # width and capacity checks live in the layout
        encode_payload(record)
        logger.debug(f"Built {record.type.name} receipt")
        return record


_BUILDER_METHODS: dict[ReceiptType, str] = {
    ReceiptType.LEAVE: "leave",
    ReceiptType.BET: "bet",
    ReceiptType.FOLD: "fold",
    ReceiptType.DIST: "dist",
    ReceiptType.SETTLE: "settle",
    ReceiptType.CREATE_CONF: "create_conf",
    ReceiptType.RESET_CONF: "reset_conf",
    ReceiptType.UNLOCK_REQUEST: "unlock_request",
    ReceiptType.FORWARD: "forward",
    ReceiptType.MESSAGE: "message",
    ReceiptType.RECOVERY: "recover",
    ReceiptType.UNLOCK: "unlock",
}


def build_receipt(
    kind: Union[ReceiptType, str, int],
    subject_addr: Optional[AddressLike] = None,
    **params: Any,
) -> ReceiptRecord:
    """
    Build a receipt by kind name or tag.

    Example:
        >>> build_receipt("leave", table_addr, hand_id=77, leaver_addr=addr)
    """
    try:
        if isinstance(kind, str):
            receipt_type = ReceiptType[kind.upper()]
        else:
            receipt_type = ReceiptType(kind)
    except (KeyError, ValueError) as e:
        raise EncodingError(f"Unknown receipt kind: {kind!r}", field_path="type") from e

    method = getattr(ReceiptBuilder(subject_addr), _BUILDER_METHODS[receipt_type])
    try:
        return method(**params)
    except TypeError as e:
        raise EncodingError(f"Bad parameters for {receipt_type.name}: {e}") from e


__all__ = [
    "ReceiptBuilder",
    "build_receipt",
]

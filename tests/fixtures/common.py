"""
Common test fixtures - record factories matching the known vectors.

Each factory builds the unsigned record whose signature under PRIV is the
corresponding token in fixtures.vectors.
"""

from typing import Optional

from poker_receipts.receipts import ReceiptBuilder
from poker_receipts.receipts.chunking import TokenSegments, render_token

from .vectors import (
    ACCOUNT_ID,
    ADDR,
    MESSAGE_CREATED,
    OTHER_ADDR,
    TABLE_ADDR,
    UNLOCK_NEW_OWNER,
)

ETH = 10**18


def make_builder(subject_addr: Optional[str] = TABLE_ADDR) -> ReceiptBuilder:
    return ReceiptBuilder(subject_addr)


def make_leave(hand_id: int = 77, leaver_addr: str = OTHER_ADDR):
    return make_builder().leave(hand_id, leaver_addr)


def make_bet(hand_id: int = 77, amount: int = 50 * 10**12):
    return make_builder().bet(hand_id, amount)


def make_fold(hand_id: int = 77, amount: int = 50 * 10**12):
    return make_builder().fold(hand_id, amount)


def make_dist(hand_id: int = 77, claim_id: int = 254, outs=None):
    if outs is None:
        outs = [0, 0, 50 * 10**12, 0, 990 * 10**12, 0]
    return make_builder().dist(hand_id, claim_id, outs)


def make_settle(lhn_byte: int = 12, last_hand_id: int = 17, amounts=None):
    if amounts is None:
        amounts = [-50 * 10**12, 50 * 10**12]
    return make_builder().settle(lhn_byte, last_hand_id, amounts)


def make_create_conf(account_id: str = ACCOUNT_ID, created: int = 1492754385):
    return make_builder(None).create_conf(account_id, created)


def make_forward(nonce: int = 14, destination_addr: str = ADDR, amount: int = 120000,
                 data: str = "0x11223344"):
    return make_builder().forward(nonce, destination_addr, amount, data)


def make_message(text: str = "message", created: int = MESSAGE_CREATED):
    return make_builder(ADDR).message(text, created)


def make_recovery(nonce: int = 77, new_signer_addr: str = OTHER_ADDR):
    return make_builder().recover(nonce, new_signer_addr)


def make_unlock(new_owner: str = UNLOCK_NEW_OWNER):
    return make_builder().unlock(new_owner)


def resign_segments(segments: TokenSegments, **changes) -> str:
    """Re-render decoded segments with some parts replaced (no re-signing)."""
    parts = {
        "header": segments.header,
        "r": segments.r,
        "s": segments.s,
        "chunks": segments.chunks,
    }
    parts.update(changes)
    return render_token(parts["header"], parts["r"], parts["s"], parts["chunks"])

"""
poker_receipts - signed binary receipts for an off-chain poker protocol.

    from poker_receipts import ReceiptBuilder, parse

    token = ReceiptBuilder(table_addr).leave(77, leaver_addr).sign(private_key)
    record = parse(token)
"""

from .crypto.signatures import address_of
from .receipts import (
    BetReceipt,
    CreateConfReceipt,
    DistReceipt,
    FoldReceipt,
    ForwardReceipt,
    LeaveReceipt,
    MessageReceipt,
    ReceiptBuilder,
    ReceiptRecord,
    ReceiptType,
    RecoveryReceipt,
    ResetConfReceipt,
    SettleReceipt,
    UnlockReceipt,
    UnlockRequestReceipt,
    build_receipt,
    digest,
    encode,
    parse,
    parse_to_params,
    recover_signer,
    sign,
)
from .schemas.errors import (
    EncodingError,
    InvalidSignatureError,
    MalformedTokenError,
    ReceiptException,
    UnsupportedVersionError,
)

__version__ = "1.0.0"

__all__ = [
    "address_of",
    "BetReceipt",
    "CreateConfReceipt",
    "DistReceipt",
    "FoldReceipt",
    "ForwardReceipt",
    "LeaveReceipt",
    "MessageReceipt",
    "ReceiptBuilder",
    "ReceiptRecord",
    "ReceiptType",
    "RecoveryReceipt",
    "ResetConfReceipt",
    "SettleReceipt",
    "UnlockReceipt",
    "UnlockRequestReceipt",
    "build_receipt",
    "digest",
    "encode",
    "parse",
    "parse_to_params",
    "recover_signer",
    "sign",
    "EncodingError",
    "InvalidSignatureError",
    "MalformedTokenError",
    "ReceiptException",
    "UnsupportedVersionError",
]

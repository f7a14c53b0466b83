"""
Receipts Module

Builder, field layouts, wire chunking and the sign/parse codec for
poker protocol receipts.
"""

from .builder import ReceiptBuilder, build_receipt
from .codec import (
    VerifiedToken,
    digest,
    encode,
    parse,
    parse_to_params,
    recover_signer,
    sign,
    verify_token,
)
from .models import (
    RECORD_TYPES,
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

__all__ = [
    "ReceiptBuilder",
    "build_receipt",
    "VerifiedToken",
    "digest",
    "encode",
    "parse",
    "parse_to_params",
    "recover_signer",
    "sign",
    "verify_token",
    "RECORD_TYPES",
    "BetReceipt",
    "CreateConfReceipt",
    "DistReceipt",
    "FoldReceipt",
    "ForwardReceipt",
    "LeaveReceipt",
    "MessageReceipt",
    "ReceiptRecord",
    "ReceiptType",
    "RecoveryReceipt",
    "ResetConfReceipt",
    "SettleReceipt",
    "UnlockReceipt",
    "UnlockRequestReceipt",
]

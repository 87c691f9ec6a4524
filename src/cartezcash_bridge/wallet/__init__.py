"""Wallet capability used by the orchestrator to send transactions."""

from cartezcash_bridge.wallet.base import (
    TransactionRequest,
    TxHandle,
    TxReceipt,
    WalletCapability,
)
from cartezcash_bridge.wallet.factory import get_wallet

__all__ = [
    "TransactionRequest",
    "TxHandle",
    "TxReceipt",
    "WalletCapability",
    "get_wallet",
]

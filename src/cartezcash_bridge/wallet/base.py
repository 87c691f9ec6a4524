"""Base interfaces for wallet access.

The orchestrator never talks to a wallet library directly. It hands a
``TransactionRequest`` to a ``WalletCapability`` and gets back a ``TxHandle``
that can later be awaited for its receipt.

Transaction flow:
1. Orchestrator encodes calldata against a contract binding
2. Wallet fills in sender, nonce and fees, signs and broadcasts
3. Caller optionally waits for the receipt through the handle
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TransactionRequest:
    """An unsigned contract call for the wallet to send.

    Attributes:
        to: Contract address (checksummed)
        data: ABI-encoded calldata as 0x-prefixed hex
        value: Native value in wei
        description: Human-readable summary for logs and wallet prompts
    """
    to: str
    data: str
    value: int = 0
    description: str = ""


@dataclass(frozen=True)
class TxReceipt:
    """Mined transaction outcome."""
    tx_hash: str
    status: int
    block_number: Optional[int] = None
    gas_used: Optional[int] = None

    @property
    def succeeded(self) -> bool:
        return self.status == 1


class TxHandle:
    """Handle to a broadcast transaction."""

    def __init__(self, tx_hash: str, wallet: "WalletCapability", description: str = ""):
        self.tx_hash = tx_hash
        self.description = description
        self._wallet = wallet
        self.receipt: Optional[TxReceipt] = None

    async def wait(self, timeout: Optional[float] = None) -> TxReceipt:
        """Wait until the transaction is mined.

        Args:
            timeout: Seconds to wait (wallet default if None)

        Returns:
            The transaction receipt

        Raises:
            WalletError: If the receipt does not arrive in time
        """
        if self.receipt is None:
            self.receipt = await self._wallet.wait_for_receipt(self.tx_hash, timeout)
        return self.receipt

    def __repr__(self) -> str:
        return f"TxHandle(tx_hash={self.tx_hash!r})"


class WalletCapability(ABC):
    """Minimal capability the orchestrator needs from a connected wallet."""

    @abstractmethod
    async def get_address(self) -> str:
        """Return the connected account address (checksummed)."""
        pass

    @abstractmethod
    async def current_chain_id(self) -> str:
        """Return the active chain id as 0x-prefixed lowercase hex."""
        pass

    @abstractmethod
    async def send_transaction(self, request: TransactionRequest) -> TxHandle:
        """Sign (or have the node sign) and broadcast a transaction.

        Raises:
            WalletError: If the provider rejects the request
        """
        pass

    @abstractmethod
    async def wait_for_receipt(self, tx_hash: str, timeout: Optional[float] = None) -> TxReceipt:
        """Wait for a transaction receipt.

        Raises:
            WalletError: On timeout or provider failure
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"

"""Local account wallet.

Signs transactions in-process with an ``eth_account`` key and broadcasts
them through ``web3``'s async provider. Suitable for:
- Development against a local anvil/hardhat chain
- Scripted deposits from the command line

WARNING: The private key is held in memory.
"""

import asyncio
import logging
from typing import Optional

from eth_account import Account
from web3 import AsyncHTTPProvider, AsyncWeb3

from cartezcash_bridge.errors import WalletError
from cartezcash_bridge.wallet.base import (
    TransactionRequest,
    TxHandle,
    TxReceipt,
    WalletCapability,
)

logger = logging.getLogger(__name__)


class LocalAccountWallet(WalletCapability):
    """Wallet backed by an in-memory private key."""

    def __init__(
        self,
        private_key: str,
        rpc_url: str,
        w3: Optional[AsyncWeb3] = None,
        receipt_timeout: float = 120.0,
    ):
        """Initialize wallet.

        Args:
            private_key: Hex private key (with or without 0x)
            rpc_url: JSON-RPC endpoint of the execution layer
            w3: Pre-built AsyncWeb3 instance (tests, shared providers)
            receipt_timeout: Default seconds to wait for receipts
        """
        self._account = Account.from_key(private_key)
        self._w3 = w3 or AsyncWeb3(AsyncHTTPProvider(rpc_url))
        self.receipt_timeout = receipt_timeout
        logger.info(f"Loaded local account {self._account.address}")

    @property
    def address(self) -> str:
        return self._account.address

    async def get_address(self) -> str:
        return self._account.address

    async def current_chain_id(self) -> str:
        try:
            chain_id = await self._w3.eth.chain_id
        except Exception as e:
            raise WalletError("Failed to read chain id", cause=e) from e
        return hex(chain_id)

    async def _get_gas_fees(self) -> tuple[int, int]:
        """Return (max_priority_fee, max_fee) for an EIP-1559 transaction."""
        latest_block = await self._w3.eth.get_block("latest")
        base_fee = latest_block.get("baseFeePerGas", 0)
        max_priority_fee = await self._w3.eth.max_priority_fee

        # Leave room for one full base fee increase
        max_fee = base_fee * 2 + max_priority_fee
        return max_priority_fee, max_fee

    async def send_transaction(self, request: TransactionRequest) -> TxHandle:
        try:
            chain_id, nonce, (max_priority_fee, max_fee) = await asyncio.gather(
                self._w3.eth.chain_id,
                self._w3.eth.get_transaction_count(self.address, "pending"),
                self._get_gas_fees(),
            )

            tx = {
                "from": self.address,
                "to": AsyncWeb3.to_checksum_address(request.to),
                "value": request.value,
                "data": request.data,
                "nonce": nonce,
                "chainId": chain_id,
                "maxPriorityFeePerGas": max_priority_fee,
                "maxFeePerGas": max_fee,
            }
            tx["gas"] = await self._w3.eth.estimate_gas(tx)

            signed = self._account.sign_transaction(tx)
            tx_hash = await self._w3.eth.send_raw_transaction(signed.raw_transaction)

        except Exception as e:
            logger.error(f"Failed to send transaction ({request.description}): {e}")
            raise WalletError(f"Transaction rejected: {request.description or request.to}", cause=e) from e

        tx_hash_hex = AsyncWeb3.to_hex(tx_hash)
        logger.info(f"Broadcast {tx_hash_hex}: {request.description}")
        return TxHandle(tx_hash_hex, self, request.description)

    async def wait_for_receipt(self, tx_hash: str, timeout: Optional[float] = None) -> TxReceipt:
        try:
            receipt = await self._w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=timeout or self.receipt_timeout
            )
        except Exception as e:
            raise WalletError(f"No receipt for {tx_hash}", cause=e) from e

        return TxReceipt(
            tx_hash=tx_hash,
            status=int(receipt["status"]),
            block_number=receipt.get("blockNumber"),
            gas_used=receipt.get("gasUsed"),
        )

    def __repr__(self) -> str:
        return f"LocalAccountWallet(address={self.address})"

"""Node-managed account wallet.

Uses an account unlocked on the node itself (anvil, hardhat) and talks plain
JSON-RPC over httpx, the way a browser-injected wallet forwards requests:
- eth_accounts / eth_chainId for the capability reads
- eth_sendTransaction to let the node sign and broadcast
- eth_getTransactionReceipt polling for confirmation
"""

import asyncio
import itertools
import logging
import time
from typing import Any, Optional

import httpx

from cartezcash_bridge.errors import WalletError
from cartezcash_bridge.wallet.base import (
    TransactionRequest,
    TxHandle,
    TxReceipt,
    WalletCapability,
)

logger = logging.getLogger(__name__)


class NodeAccountWallet(WalletCapability):
    """Wallet whose account is unlocked on the RPC node."""

    def __init__(
        self,
        rpc_url: str,
        account: Optional[str] = None,
        receipt_timeout: float = 120.0,
        poll_interval: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize wallet.

        Args:
            rpc_url: JSON-RPC endpoint
            account: Account to send from (first node account if None)
            receipt_timeout: Default seconds to wait for receipts
            poll_interval: Seconds between receipt polls
            transport: Custom httpx transport (tests)
        """
        self.rpc_url = rpc_url
        self._account = account
        self.receipt_timeout = receipt_timeout
        self.poll_interval = poll_interval
        self._transport = transport
        self._ids = itertools.count(1)

    async def _rpc(self, method: str, params: list) -> Any:
        """Send one JSON-RPC request and return its result."""
        try:
            async with httpx.AsyncClient(timeout=30.0, transport=self._transport) as client:
                response = await client.post(
                    self.rpc_url,
                    json={
                        "jsonrpc": "2.0",
                        "method": method,
                        "params": params,
                        "id": next(self._ids),
                    },
                )
        except httpx.HTTPError as e:
            raise WalletError(f"RPC {method} failed", cause=e) from e

        if response.status_code != 200:
            raise WalletError(f"RPC {method} failed with HTTP {response.status_code}")

        data = response.json()
        if "error" in data:
            error = data["error"]
            message = error.get("message", error) if isinstance(error, dict) else error
            raise WalletError(f"RPC {method} error: {message}")

        return data.get("result")

    async def get_address(self) -> str:
        if self._account is None:
            accounts = await self._rpc("eth_accounts", [])
            if not accounts:
                raise WalletError("Node has no unlocked accounts")
            self._account = accounts[0]
        return self._account

    async def current_chain_id(self) -> str:
        result = await self._rpc("eth_chainId", [])
        try:
            return hex(int(result, 16))
        except (TypeError, ValueError) as e:
            raise WalletError(f"Node returned an invalid chain id: {result!r}", cause=e) from e

    async def send_transaction(self, request: TransactionRequest) -> TxHandle:
        sender = await self.get_address()
        try:
            tx_hash = await self._rpc(
                "eth_sendTransaction",
                [{
                    "from": sender,
                    "to": request.to,
                    "value": hex(request.value),
                    "data": request.data,
                }],
            )
        except WalletError as e:
            logger.error(f"Failed to send transaction ({request.description}): {e}")
            raise

        logger.info(f"Broadcast {tx_hash}: {request.description}")
        return TxHandle(tx_hash, self, request.description)

    async def wait_for_receipt(self, tx_hash: str, timeout: Optional[float] = None) -> TxReceipt:
        deadline = time.monotonic() + (timeout or self.receipt_timeout)

        while True:
            receipt = await self._rpc("eth_getTransactionReceipt", [tx_hash])
            if receipt is not None:
                return TxReceipt(
                    tx_hash=tx_hash,
                    status=int(receipt.get("status", "0x0"), 16),
                    block_number=_hex_to_int(receipt.get("blockNumber")),
                    gas_used=_hex_to_int(receipt.get("gasUsed")),
                )

            if time.monotonic() >= deadline:
                raise WalletError(f"Timed out waiting for receipt of {tx_hash}")
            await asyncio.sleep(self.poll_interval)

    def __repr__(self) -> str:
        return f"NodeAccountWallet(rpc_url={self.rpc_url!r}, account={self._account!r})"


def _hex_to_int(value: Optional[str]) -> Optional[int]:
    return int(value, 16) if value else None

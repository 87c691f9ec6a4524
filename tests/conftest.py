"""Pytest configuration and fixtures."""

import os
from typing import Optional

import pytest

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "true"
os.environ.pop("WALLET_PRIVATE_KEY", None)
os.environ.pop("DAPP_ADDRESS", None)
os.environ.pop("CHAINS_FILE", None)

from cartezcash_bridge.chains import DEFAULT_CHAINS, ChainRegistry
from cartezcash_bridge.config import Settings
from cartezcash_bridge.errors import WalletError
from cartezcash_bridge.orchestrator import TransferOrchestrator
from cartezcash_bridge.wallet.base import (
    TransactionRequest,
    TxHandle,
    TxReceipt,
    WalletCapability,
)

LOCALHOST = "0x7a69"
SEPOLIA = "0xaa36a7"
ACCOUNT = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
LOCAL_DAPP = "0x47432A4070539BeF308B24a7AAE2940b801d0681"


class FakeWallet(WalletCapability):
    """In-memory wallet that records every request it is asked to send."""

    def __init__(self, chain_id: Optional[str] = LOCALHOST, address: str = ACCOUNT):
        self.chain_id = chain_id
        self.address = address
        self.sent: list[TransactionRequest] = []
        self.send_error: Optional[Exception] = None
        self.receipt_error: Optional[Exception] = None
        self.receipt_status = 1

    async def get_address(self) -> str:
        return self.address

    async def current_chain_id(self) -> str:
        if self.chain_id is None:
            raise WalletError("Wallet is not connected")
        return self.chain_id

    async def send_transaction(self, request: TransactionRequest) -> TxHandle:
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(request)
        return TxHandle(f"0x{len(self.sent):064x}", self, request.description)

    async def wait_for_receipt(self, tx_hash: str, timeout: Optional[float] = None) -> TxReceipt:
        if self.receipt_error is not None:
            raise self.receipt_error
        return TxReceipt(tx_hash=tx_hash, status=self.receipt_status, block_number=1, gas_used=21000)


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def registry() -> ChainRegistry:
    return ChainRegistry(DEFAULT_CHAINS)


@pytest.fixture
def wallet() -> FakeWallet:
    return FakeWallet()


@pytest.fixture
def orchestrator(registry, wallet, settings) -> TransferOrchestrator:
    return TransferOrchestrator(registry, wallet, settings)


def sample_proof() -> dict:
    """A structurally complete voucher proof, as returned by the rollup reader."""
    return {
        "validity": {
            "inputIndexWithinEpoch": 0,
            "outputIndexWithinInput": 0,
            "outputHashesRootHash": "0x" + "11" * 32,
            "vouchersEpochRootHash": "0x" + "22" * 32,
            "noticesEpochRootHash": "0x" + "33" * 32,
            "machineStateHash": "0x" + "44" * 32,
            "outputHashInOutputHashesSiblings": ["0x" + "55" * 32],
            "outputHashesInEpochSiblings": ["0x" + "66" * 32, "0x" + "77" * 32],
        },
        "context": "0x",
    }

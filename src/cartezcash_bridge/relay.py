"""Tracks whether the dApp has been told its own address on-chain.

The rollup only learns its deployed address through the DAppAddressRelay
contract, and it cannot emit executable vouchers before that. The handshake
moves to RELAYED only from a mined, successful relay receipt for the context
(chain + dApp) that is still active; switching either one starts over.
"""

import logging
from enum import Enum
from typing import Optional

from cartezcash_bridge.config import VoucherPolicy
from cartezcash_bridge.wallet.base import TxReceipt

logger = logging.getLogger(__name__)


class RelayState(str, Enum):
    NOT_RELAYED = "not_relayed"
    RELAYED = "relayed"


class RelayHandshake:
    """Relay state for the active chain and dApp."""

    def __init__(self):
        self.state = RelayState.NOT_RELAYED
        self.chain_id: Optional[str] = None
        self.dapp_address: Optional[str] = None

    @property
    def is_relayed(self) -> bool:
        return self.state == RelayState.RELAYED

    def reset(self, chain_id: Optional[str], dapp_address: Optional[str]) -> None:
        """Start over for a new active chain/dApp."""
        if self.state == RelayState.RELAYED:
            logger.info(
                f"Relay state reset (chain {self.chain_id} -> {chain_id}, "
                f"dApp {self.dapp_address} -> {dapp_address})"
            )
        self.state = RelayState.NOT_RELAYED
        self.chain_id = chain_id
        self.dapp_address = dapp_address

    def confirm(self, receipt: TxReceipt, chain_id: str, dapp_address: str) -> bool:
        """Apply a relay receipt.

        Args:
            receipt: Mined receipt of the relay transaction
            chain_id: Chain the relay was sent on
            dapp_address: dApp address that was relayed

        Returns:
            True if the handshake is now RELAYED
        """
        if not receipt.succeeded:
            logger.warning(f"Relay transaction {receipt.tx_hash} reverted")
            return False

        if chain_id != self.chain_id or dapp_address != self.dapp_address:
            logger.warning(
                f"Ignoring relay receipt {receipt.tx_hash} for stale context "
                f"{chain_id}/{dapp_address}"
            )
            return False

        self.state = RelayState.RELAYED
        logger.info(f"dApp {dapp_address} relayed on chain {chain_id}")
        return True

    def vouchers_visible(self, policy: VoucherPolicy) -> bool:
        """Whether the voucher list should be offered to the user."""
        if policy == VoucherPolicy.UNGATED:
            return True
        return self.is_relayed

"""Wallet factory.

Creates the wallet backend from configuration:
1. WALLET_PRIVATE_KEY set -> LocalAccountWallet (signs in-process)
2. Otherwise -> NodeAccountWallet (node-unlocked account, dev chains)
"""

import logging
from typing import Optional

from cartezcash_bridge.chains import ChainConfig
from cartezcash_bridge.config import Settings, get_settings
from cartezcash_bridge.wallet.base import WalletCapability

logger = logging.getLogger(__name__)


def get_wallet(chain: ChainConfig, settings: Optional[Settings] = None) -> WalletCapability:
    """Create a wallet connected to the given chain.

    Args:
        chain: Chain whose RPC is used unless WALLET_RPC_URL overrides it
        settings: Settings (cached settings if None)

    Returns:
        WalletCapability instance
    """
    settings = settings or get_settings()
    rpc_url = settings.wallet_rpc_url or chain.rpc_url

    if settings.has_private_key:
        from cartezcash_bridge.wallet.local import LocalAccountWallet

        logger.info(f"Using local account wallet on {rpc_url}")
        return LocalAccountWallet(
            settings.wallet_private_key,
            rpc_url,
            receipt_timeout=settings.receipt_timeout,
        )

    from cartezcash_bridge.wallet.node import NodeAccountWallet

    logger.info(f"Using node account wallet on {rpc_url}")
    return NodeAccountWallet(rpc_url, receipt_timeout=settings.receipt_timeout)

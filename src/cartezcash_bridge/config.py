"""Application configuration using pydantic-settings.

Settings are read once from the environment (and an optional ``.env`` file)
and cached; the chain table itself lives in :mod:`cartezcash_bridge.chains`.
"""

from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class VoucherPolicy(str, Enum):
    """Whether voucher listing waits for the dApp address relay."""

    GATED = "gated"        # Show vouchers only once the dApp knows its address
    UNGATED = "ungated"    # Always show vouchers


class Settings(BaseSettings):
    """Bridge client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=False, description="Enable debug logging")

    # ======================
    # Chains / dApp
    # ======================
    chains_file: Optional[str] = Field(
        default=None,
        description="JSON chain table keyed by hex chain id (built-in table if unset)",
    )
    dapp_address: Optional[str] = Field(
        default=None, description="Override of the rollup dApp contract address"
    )
    voucher_policy: VoucherPolicy = Field(
        default=VoucherPolicy.GATED,
        description="Gate voucher listing on the dApp address relay",
    )
    accepted_address_prefixes: str = Field(
        default="1cb8",
        description="Comma-separated hex version prefixes accepted for destinations",
    )

    # ======================
    # Wallet
    # ======================
    wallet_private_key: Optional[str] = Field(
        default=None, description="Hex private key for the local signing account"
    )
    wallet_rpc_url: Optional[str] = Field(
        default=None, description="RPC URL for the wallet (defaults to the chain RPC)"
    )
    receipt_timeout: float = Field(
        default=120.0, description="Seconds to wait for a transaction receipt"
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def has_private_key(self) -> bool:
        """Check if a local signing key is configured."""
        return bool(self.wallet_private_key)

    @property
    def address_prefixes(self) -> list[bytes]:
        """Parse accepted transparent address prefixes into raw bytes."""
        return [
            bytes.fromhex(prefix.strip().removeprefix("0x"))
            for prefix in self.accepted_address_prefixes.split(",")
            if prefix.strip()
        ]

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "chains_file": self.chains_file or "(built-in)",
            "dapp_address": self.dapp_address or "(per chain)",
            "voucher_policy": self.voucher_policy.value,
            "accepted_address_prefixes": self.accepted_address_prefixes,
            "wallet_private_key": "***" if self.wallet_private_key else "(not set)",
            "wallet_rpc_url": self.wallet_rpc_url or "(chain rpc)",
            "receipt_timeout": self.receipt_timeout,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

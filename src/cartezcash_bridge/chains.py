"""Chain registry for the CarteZcash rollup deployments.

Maps a chain id to the RPC endpoint, native token and the addresses of the
Cartesi rollup contracts on that chain. The table is loaded once (built-in
or from a JSON file in the frontend ``config.json`` shape) and never mutated.
"""

import json
import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from web3 import Web3

from cartezcash_bridge.address import looks_like_transparent_address
from cartezcash_bridge.errors import ConfigurationError, UnsupportedChainError

logger = logging.getLogger(__name__)

ChainId = Union[str, int]

# Cartesi rollups v1 deterministic deployment (same address on every chain)
ETHER_PORTAL_ADDRESS = "0xFfdbe43d4c855BF7e0f105c400A50857f53AB044"
INPUT_BOX_ADDRESS = "0x59b22D57D4f067708AB0c00552767405926dc768"
DAPP_ADDRESS_RELAY_ADDRESS = "0xF5DE34d6BbC0446E2a45719E718efEbaaE179daE"

# Transparent address holding burned funds inside the rollup
DEFAULT_EXIT_ADDRESS = "t1Hsc1LR8yKnbbe3twRp88p6vFfC5t7DLbs"


def normalize_chain_id(chain_id: ChainId) -> str:
    """Normalize a chain id to lowercase hex with 0x prefix.

    Args:
        chain_id: Int (31337), hex string ("0x7A69") or decimal string ("31337")

    Returns:
        Hex chain id, e.g. "0x7a69"
    """
    if isinstance(chain_id, bool):
        raise ValueError(f"Invalid chain id: {chain_id!r}")
    if isinstance(chain_id, int):
        value = chain_id
    else:
        text = str(chain_id).strip().lower()
        try:
            value = int(text, 16) if text.startswith("0x") else int(text)
        except ValueError:
            raise ValueError(f"Invalid chain id: {chain_id!r}")
    if value <= 0:
        raise ValueError(f"Invalid chain id: {chain_id!r}")
    return hex(value)


def _checksum_or_empty(value: Optional[str]) -> str:
    if not value:
        return ""
    if not Web3.is_address(value.lower()):
        raise ValueError(f"Not a 20-byte hex address: {value}")
    return Web3.to_checksum_address(value)


class ContractAddresses(BaseModel):
    """Deployed addresses of the rollup contract roles on one chain."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, validate_default=True)

    ether_portal: str = Field(default=ETHER_PORTAL_ADDRESS, alias="EtherPortal")
    dapp_address_relay: str = Field(default=DAPP_ADDRESS_RELAY_ADDRESS, alias="DAppAddressRelay")
    input_box: str = Field(default=INPUT_BOX_ADDRESS, alias="InputBox")

    @field_validator("ether_portal", "dapp_address_relay", "input_box", mode="before")
    @classmethod
    def _validate_address(cls, value: Optional[str]) -> str:
        return _checksum_or_empty(value)


class ChainConfig(BaseModel):
    """Configuration for one chain the bridge is deployed on."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, validate_default=True)

    chain_id: str = Field(alias="chainId")
    label: str
    native_token: str = Field(default="ETH", alias="token")
    rpc_url: str = Field(alias="rpcUrl")
    dapp_address: str = Field(default="", alias="dappAddress")
    exit_address: str = Field(default=DEFAULT_EXIT_ADDRESS, alias="exitAddress")
    decimals: int = 18
    contracts: ContractAddresses = Field(default_factory=ContractAddresses)

    @field_validator("chain_id", mode="before")
    @classmethod
    def _validate_chain_id(cls, value: ChainId) -> str:
        return normalize_chain_id(value)

    @field_validator("dapp_address", mode="before")
    @classmethod
    def _validate_dapp_address(cls, value: Optional[str]) -> str:
        return _checksum_or_empty(value)

    @field_validator("exit_address")
    @classmethod
    def _validate_exit_address(cls, value: str) -> str:
        if not looks_like_transparent_address(value):
            raise ValueError(f"Exit address is not a transparent address: {value}")
        return value

    @property
    def chain_id_int(self) -> int:
        return int(self.chain_id, 16)


# ======================
# Built-in deployments
# ======================

DEFAULT_CHAINS: list[ChainConfig] = [
    ChainConfig(
        chain_id="0x7a69",
        label="localhost",
        native_token="ETH",
        rpc_url="http://localhost:8545",
        dapp_address="0x47432A4070539BeF308B24a7AAE2940b801d0681",
    ),
    ChainConfig(
        chain_id="0xaa36a7",
        label="Sepolia Test Network",
        native_token="SepoliaETH",
        rpc_url="https://rpc.sepolia.org",
    ),
]


class ChainRegistry:
    """Read-only lookup of chain id -> ChainConfig."""

    def __init__(self, chains: Iterable[ChainConfig]):
        self._chains: dict[str, ChainConfig] = {}
        for cfg in chains:
            if cfg.chain_id in self._chains:
                raise ConfigurationError(f"Duplicate chain id in registry: {cfg.chain_id}")
            self._chains[cfg.chain_id] = cfg

    def resolve(self, chain_id: ChainId) -> ChainConfig:
        """Look up a chain.

        Raises:
            UnsupportedChainError: If the chain is not configured
        """
        try:
            key = normalize_chain_id(chain_id)
        except ValueError:
            raise UnsupportedChainError(str(chain_id))

        cfg = self._chains.get(key)
        if cfg is None:
            raise UnsupportedChainError(key)
        return cfg

    def get(self, chain_id: ChainId) -> Optional[ChainConfig]:
        try:
            return self.resolve(chain_id)
        except UnsupportedChainError:
            return None

    def list(self) -> list[ChainConfig]:
        return list(self._chains.values())

    def __contains__(self, chain_id: ChainId) -> bool:
        return self.get(chain_id) is not None

    def __len__(self) -> int:
        return len(self._chains)

    @classmethod
    def from_mapping(cls, data: dict) -> "ChainRegistry":
        """Build a registry from a ``{chain_id: {...}}`` mapping.

        Raises:
            ConfigurationError: If an entry is invalid
        """
        chains = []
        for chain_id, entry in data.items():
            if not isinstance(entry, dict):
                raise ConfigurationError(f"Chain entry {chain_id} must be an object")
            try:
                chains.append(ChainConfig.model_validate({**entry, "chainId": chain_id}))
            except ValidationError as e:
                raise ConfigurationError(f"Invalid config for chain {chain_id}", cause=e) from e
        return cls(chains)

    @classmethod
    def from_file(cls, path: Path) -> "ChainRegistry":
        """Load a registry from a JSON file.

        Raises:
            ConfigurationError: If the file is missing or invalid
        """
        if not path.exists():
            raise ConfigurationError(f"Chain configuration file not found: {path}")

        logger.info(f"Loading chain configuration from {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to parse chain configuration {path}", cause=e) from e

        if not isinstance(data, dict):
            raise ConfigurationError("Chain configuration must be a JSON object")

        return cls.from_mapping(data)


def load_registry(chains_file: Optional[str] = None) -> ChainRegistry:
    """Load the chain registry from a file, or the built-in table."""
    if chains_file:
        return ChainRegistry.from_file(Path(chains_file))
    return ChainRegistry(DEFAULT_CHAINS)

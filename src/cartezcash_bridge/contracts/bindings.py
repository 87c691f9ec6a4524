"""Contract bindings for the rollup roles on the active chain.

A ``ContractBindingSet`` holds one handle per role, all scoped to one chain
and one dApp address. Binding only builds ``web3`` contract objects: no RPC
request and no transaction happens until a handle method is called. Writes
go through the wallet, reads through the chain's RPC endpoint.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from hexbytes import HexBytes
from web3 import AsyncHTTPProvider, AsyncWeb3

from cartezcash_bridge.chains import ChainConfig
from cartezcash_bridge.contracts.abis import (
    CARTESI_DAPP_ABI,
    DAPP_ADDRESS_RELAY_ABI,
    ETHER_PORTAL_ABI,
    INPUT_BOX_ABI,
    OUTPUT_VALIDITY_FIELDS,
)
from cartezcash_bridge.errors import NotReadyError
from cartezcash_bridge.wallet.base import TransactionRequest, TxHandle, WalletCapability

logger = logging.getLogger(__name__)


class ContractHandle:
    """A contract bound to an address, sending writes through a wallet."""

    ABI: list[dict] = []

    def __init__(self, address: str, w3: AsyncWeb3, wallet: WalletCapability):
        self.address = AsyncWeb3.to_checksum_address(address)
        self.contract = w3.eth.contract(self.address, abi=self.ABI)
        self._wallet = wallet

    def encode(self, fn_name: str, *args: Any) -> str:
        """ABI-encode a call to ``fn_name`` as 0x-prefixed calldata."""
        return getattr(self.contract.functions, fn_name)(*args)._encode_transaction_data()

    async def _send(self, data: str, value: int = 0, description: str = "") -> TxHandle:
        request = TransactionRequest(
            to=self.address,
            data=data,
            value=value,
            description=description,
        )
        return await self._wallet.send_transaction(request)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(address={self.address})"


class EtherPortalHandle(ContractHandle):
    """Accepts Ether earmarked for a dApp."""

    ABI = ETHER_PORTAL_ABI

    async def deposit_ether(self, dapp: str, exec_layer_data: bytes, value: int) -> TxHandle:
        data = self.encode("depositEther", AsyncWeb3.to_checksum_address(dapp), exec_layer_data)
        return await self._send(data, value=value, description=f"depositEther {value} wei")


class RelayHandle(ContractHandle):
    """Tells a dApp its own deployed address."""

    ABI = DAPP_ADDRESS_RELAY_ABI

    async def relay_dapp_address(self, dapp: str) -> TxHandle:
        data = self.encode("relayDAppAddress", AsyncWeb3.to_checksum_address(dapp))
        return await self._send(data, description=f"relayDAppAddress {dapp}")


class InputBoxHandle(ContractHandle):
    """Generic input submission."""

    ABI = INPUT_BOX_ABI

    async def add_input(self, dapp: str, payload: bytes) -> TxHandle:
        data = self.encode("addInput", AsyncWeb3.to_checksum_address(dapp), payload)
        return await self._send(data, description=f"addInput {len(payload)} bytes")


class DAppHandle(ContractHandle):
    """The rollup dApp contract itself (voucher execution)."""

    ABI = CARTESI_DAPP_ABI

    async def execute_voucher(self, destination: str, payload: bytes, proof: dict) -> TxHandle:
        data = self.encode(
            "executeVoucher",
            AsyncWeb3.to_checksum_address(destination),
            payload,
            proof_to_tuple(proof),
        )
        return await self._send(data, description=f"executeVoucher to {destination}")

    async def was_voucher_executed(self, input_index: int, output_index: int) -> bool:
        return await self.contract.functions.wasVoucherExecuted(input_index, output_index).call()


def _to_bytes(value: Any) -> Any:
    if isinstance(value, str):
        return bytes(HexBytes(value))
    if isinstance(value, list):
        return [_to_bytes(v) for v in value]
    return value


def proof_to_tuple(proof: dict) -> tuple:
    """Convert a GraphQL voucher proof into the ``Proof`` struct tuple.

    Args:
        proof: ``{"validity": {...}, "context": "0x..."}`` with camelCase keys

    Returns:
        ``(validity_tuple, context_bytes)``
    """
    validity = proof["validity"]
    validity_tuple = tuple(_to_bytes(validity[name]) for name in OUTPUT_VALIDITY_FIELDS)
    return (validity_tuple, _to_bytes(proof.get("context") or "0x"))


@dataclass(frozen=True)
class ContractBindingSet:
    """One handle per rollup contract role for one chain and dApp."""

    chain: ChainConfig
    dapp_address: str
    ether_portal: EtherPortalHandle
    relay: RelayHandle
    input_box: InputBoxHandle
    dapp: DAppHandle

    @property
    def chain_id(self) -> str:
        return self.chain.chain_id

    def matches(self, chain_id: str, dapp_address: str) -> bool:
        return self.chain.chain_id == chain_id and self.dapp_address == dapp_address


def bind(
    chain: ChainConfig,
    wallet: WalletCapability,
    dapp_address: Optional[str] = None,
    w3: Optional[AsyncWeb3] = None,
) -> ContractBindingSet:
    """Bind every contract role for a chain.

    Args:
        chain: Resolved chain configuration
        wallet: Wallet that sends write calls
        dapp_address: dApp address (the chain's configured one if None)
        w3: Read provider (built from the chain RPC URL if None)

    Returns:
        ContractBindingSet for the chain

    Raises:
        NotReadyError: If the dApp or a role address is not configured
    """
    dapp = dapp_address or chain.dapp_address
    if not dapp:
        raise NotReadyError(f"No dApp address configured for chain {chain.chain_id}")

    contracts = chain.contracts
    for role, address in (
        ("EtherPortal", contracts.ether_portal),
        ("DAppAddressRelay", contracts.dapp_address_relay),
        ("InputBox", contracts.input_box),
    ):
        if not address:
            raise NotReadyError(f"No {role} address configured for chain {chain.chain_id}")

    w3 = w3 or AsyncWeb3(AsyncHTTPProvider(chain.rpc_url))
    dapp = AsyncWeb3.to_checksum_address(dapp)

    bindings = ContractBindingSet(
        chain=chain,
        dapp_address=dapp,
        ether_portal=EtherPortalHandle(contracts.ether_portal, w3, wallet),
        relay=RelayHandle(contracts.dapp_address_relay, w3, wallet),
        input_box=InputBoxHandle(contracts.input_box, w3, wallet),
        dapp=DAppHandle(dapp, w3, wallet),
    )
    logger.debug(f"Bound rollup contracts on {chain.label} ({chain.chain_id}) for dApp {dapp}")
    return bindings

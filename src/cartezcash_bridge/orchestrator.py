"""Transfer orchestration between the execution layer and the rollup.

The orchestrator is the facade used by a UI or the CLI. It owns the contract
bindings for the active chain/dApp pair and the relay handshake, and it
composes the address codec, the amount conversion and the withdraw command
builder.

Flow:
1. sync() reads the wallet's chain, resolves it and (re)binds contracts
2. deposit() / relay_address() / submit_raw_input() send transactions
3. withdraw_command() derives the command to run in a Zcash wallet
4. Vouchers produced by withdrawals are executed through execute_voucher()
"""

import logging
from typing import Optional, Union

from hexbytes import HexBytes
from web3 import Web3

from cartezcash_bridge.address import AddressCodec
from cartezcash_bridge.amounts import parse_units
from cartezcash_bridge.chains import ChainConfig, ChainRegistry, normalize_chain_id
from cartezcash_bridge.config import Settings, VoucherPolicy, get_settings
from cartezcash_bridge.contracts.bindings import ContractBindingSet, bind
from cartezcash_bridge.errors import (
    DepositFailedError,
    InputRejectedError,
    InvalidAddressError,
    InvalidAmountError,
    NotReadyError,
    RelayFailedError,
    VoucherExecutionError,
    WalletError,
)
from cartezcash_bridge.models import DepositIntent, Voucher
from cartezcash_bridge.relay import RelayHandshake, RelayState
from cartezcash_bridge.wallet.base import TxHandle, WalletCapability
from cartezcash_bridge.withdraw import WithdrawCommand, WithdrawCommandBuilder

logger = logging.getLogger(__name__)


def validate_evm_address(address: str) -> str:
    """Validate a 20-byte hex address and return it checksummed.

    Raises:
        InvalidAddressError: If the address is malformed
    """
    value = (address or "").strip()
    if not (value.startswith("0x") and Web3.is_address(value.lower())):
        raise InvalidAddressError(f"Not a 20-byte hex address: {address!r}")
    return Web3.to_checksum_address(value)


class TransferOrchestrator:
    """Deposit, relay, input and withdraw operations for the connected wallet."""

    def __init__(
        self,
        registry: ChainRegistry,
        wallet: WalletCapability,
        settings: Optional[Settings] = None,
        codec: Optional[AddressCodec] = None,
        withdraw_builder: Optional[WithdrawCommandBuilder] = None,
    ):
        """Initialize orchestrator.

        Args:
            registry: Chain registry loaded at startup
            wallet: Connected wallet capability
            settings: Settings (cached settings if None)
            codec: Transparent address codec (built from settings if None)
            withdraw_builder: Withdraw command builder
        """
        settings = settings or get_settings()

        self.registry = registry
        self.wallet = wallet
        self.voucher_policy = settings.voucher_policy
        self.receipt_timeout = settings.receipt_timeout
        self.codec = codec or AddressCodec(settings.address_prefixes)
        self.withdraw_builder = withdraw_builder or WithdrawCommandBuilder()
        self.handshake = RelayHandshake()

        self._dapp_override: Optional[str] = None
        if settings.dapp_address:
            self._dapp_override = validate_evm_address(settings.dapp_address)
        self._bindings: Optional[ContractBindingSet] = None
        self._wallet_chain: Optional[str] = None

    # ======================
    # Active chain / dApp
    # ======================

    @property
    def bindings(self) -> Optional[ContractBindingSet]:
        return self._bindings

    @property
    def active_chain(self) -> Optional[ChainConfig]:
        return self._bindings.chain if self._bindings else None

    @property
    def dapp_address(self) -> Optional[str]:
        if self._bindings:
            return self._bindings.dapp_address
        return self._dapp_override

    @property
    def relay_state(self) -> RelayState:
        return self.handshake.state

    @property
    def vouchers_visible(self) -> bool:
        """Whether vouchers may be offered for the active chain and dApp.

        Under the gated policy this also requires the wallet to still be on
        the bound chain, as last seen by sync() or an operation.
        """
        if self.voucher_policy == VoucherPolicy.GATED and not self._wallet_on_bound_chain():
            return False
        return self.handshake.vouchers_visible(self.voucher_policy)

    def _wallet_on_bound_chain(self) -> bool:
        return self._bindings is not None and self._wallet_chain == self._bindings.chain_id

    async def sync(self) -> ContractBindingSet:
        """Bind contracts for the wallet's current chain.

        Rebinding (and the relay reset that goes with it) only happens when
        the chain or dApp actually changed.

        Raises:
            NotReadyError: If the wallet cannot report its chain
            UnsupportedChainError: If the chain has no deployment
        """
        chain_id = await self._wallet_chain_id()
        chain = self.registry.resolve(chain_id)
        dapp = self._dapp_override or chain.dapp_address

        if self._bindings is not None and self._bindings.matches(chain.chain_id, dapp):
            return self._bindings

        return self._rebind(chain)

    def set_dapp_address(self, address: str) -> None:
        """Point the orchestrator at another dApp deployment.

        Raises:
            InvalidAddressError: If the address is not a 20-byte hex address
        """
        dapp = validate_evm_address(address)
        if dapp == self.dapp_address:
            return

        self._dapp_override = dapp
        if self._bindings is not None:
            self._rebind(self._bindings.chain)

    def _rebind(self, chain: ChainConfig) -> ContractBindingSet:
        bindings = bind(chain, self.wallet, self._dapp_override)
        self._bindings = bindings
        self.handshake.reset(bindings.chain_id, bindings.dapp_address)
        logger.info(
            f"Active chain {chain.label} ({chain.chain_id}), dApp {bindings.dapp_address}"
        )
        return bindings

    async def _wallet_chain_id(self) -> str:
        try:
            chain_id = normalize_chain_id(await self.wallet.current_chain_id())
        except (WalletError, ValueError) as e:
            self._wallet_chain = None
            raise NotReadyError("Wallet is not connected", cause=e) from e
        self._wallet_chain = chain_id
        return chain_id

    async def _require_bindings(self) -> ContractBindingSet:
        """Return bindings, failing fast if they do not match the wallet."""
        if self._bindings is None:
            raise NotReadyError("Contracts are not bound; connect a wallet on a supported chain")

        chain_id = await self._wallet_chain_id()
        if chain_id != self._bindings.chain_id:
            raise NotReadyError(
                f"Wallet is on chain {chain_id} but contracts are bound to "
                f"{self._bindings.chain_id}"
            )
        return self._bindings

    # ======================
    # Operations
    # ======================

    async def deposit(self, intent: DepositIntent) -> TxHandle:
        """Deposit Ether into the rollup for a transparent address.

        Returns:
            Handle of the pending deposit transaction

        Raises:
            NotReadyError: If contracts are not bound
            InvalidAddressError: If the destination does not decode
            InvalidAmountError: If the amount is not exact or not positive
            DepositFailedError: If the wallet rejects the transaction
        """
        bindings = await self._require_bindings()

        payload = self.codec.decode(intent.destination)
        value = parse_units(intent.amount_native, bindings.chain.decimals)
        if value == 0:
            raise InvalidAmountError("Deposit amount must be greater than zero")

        logger.info(
            f"Depositing {intent.amount_native} {bindings.chain.native_token} "
            f"to {intent.destination}"
        )

        try:
            return await bindings.ether_portal.deposit_ether(bindings.dapp_address, payload, value)
        except Exception as e:
            logger.error(f"Deposit to {intent.destination} failed: {e}")
            raise DepositFailedError("Deposit failed", cause=e) from e

    async def relay_address(self) -> TxHandle:
        """Relay the dApp address and wait for confirmation.

        Returns:
            Handle of the mined relay transaction

        Raises:
            NotReadyError: If contracts are not bound
            RelayFailedError: If the transaction is rejected, reverts or times out
        """
        bindings = await self._require_bindings()
        chain_id, dapp = bindings.chain_id, bindings.dapp_address

        try:
            handle = await bindings.relay.relay_dapp_address(dapp)
            receipt = await handle.wait(self.receipt_timeout)
        except Exception as e:
            logger.error(f"Relay of {dapp} failed: {e}")
            raise RelayFailedError("Relay failed", cause=e) from e

        if not receipt.succeeded:
            raise RelayFailedError(f"Relay transaction {receipt.tx_hash} reverted")

        self.handshake.confirm(receipt, chain_id, dapp)
        return handle

    async def submit_raw_input(self, payload: Union[bytes, str]) -> TxHandle:
        """Send an arbitrary input to the dApp through the InputBox.

        Args:
            payload: Raw bytes, or a hex string

        Raises:
            NotReadyError: If contracts are not bound
            InputRejectedError: If the payload is not hex or the wallet rejects it
        """
        bindings = await self._require_bindings()

        if isinstance(payload, str):
            try:
                payload = bytes(HexBytes(payload))
            except ValueError as e:
                raise InputRejectedError("Input is not valid hex", cause=e) from e

        try:
            return await bindings.input_box.add_input(bindings.dapp_address, payload)
        except Exception as e:
            logger.error(f"Input submission failed: {e}")
            raise InputRejectedError("Input rejected", cause=e) from e

    async def submit_transaction(
        self, tx_bytes: Union[bytes, str], withdraw_address: Optional[str] = None
    ) -> TxHandle:
        """Submit a serialized Zcash transaction to the rollup.

        The rollup expects ``withdraw_address (20 bytes) || transaction`` and
        pays any burns in the transaction to the withdraw address.

        Args:
            tx_bytes: Serialized transaction (bytes or hex)
            withdraw_address: Recipient of burns (connected account if None)
        """
        if isinstance(tx_bytes, str):
            try:
                tx_bytes = bytes(HexBytes(tx_bytes))
            except ValueError as e:
                raise InputRejectedError("Transaction is not valid hex", cause=e) from e
        if not tx_bytes:
            raise InputRejectedError("Transaction is empty")

        recipient = validate_evm_address(withdraw_address or await self.wallet.get_address())
        payload = bytes(HexBytes(recipient)) + tx_bytes
        return await self.submit_raw_input(payload)

    async def withdraw_command(
        self, amount_native: str, destination_hex: Optional[str] = None
    ) -> WithdrawCommand:
        """Derive the withdraw command for the active chain.

        Args:
            amount_native: Amount in the native asset
            destination_hex: Ethereum recipient (connected account if None)

        Raises:
            NotReadyError: If no chain is active
            InvalidAmountError: If the amount is invalid
        """
        chain = self.active_chain
        if chain is None:
            raise NotReadyError("No active chain; connect a wallet on a supported chain")

        destination = destination_hex or await self.wallet.get_address()
        return self.withdraw_builder.build(chain.exit_address, amount_native, destination)

    async def execute_voucher(self, voucher: Voucher) -> TxHandle:
        """Execute a voucher on the base chain to claim withdrawn funds.

        Raises:
            NotReadyError: If contracts are not bound
            VoucherExecutionError: If the voucher has no proof or is rejected
        """
        bindings = await self._require_bindings()
        if not voucher.is_executable:
            raise VoucherExecutionError(
                f"Voucher {voucher.input_index}/{voucher.output_index} has no proof yet"
            )

        try:
            return await bindings.dapp.execute_voucher(
                voucher.destination, voucher.payload, voucher.proof
            )
        except Exception as e:
            logger.error(f"Voucher {voucher.input_index}/{voucher.output_index} failed: {e}")
            raise VoucherExecutionError("Voucher execution failed", cause=e) from e

    async def was_voucher_executed(self, voucher: Voucher) -> bool:
        """Check on-chain whether a voucher was already executed."""
        bindings = await self._require_bindings()
        try:
            return await bindings.dapp.was_voucher_executed(voucher.input_index, voucher.output_index)
        except Exception as e:
            raise VoucherExecutionError("Could not read voucher status", cause=e) from e

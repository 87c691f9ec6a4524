"""Error types for the bridge client.

Every error carries a stable ``code`` so callers (CLI, UI layer) can branch on
the kind of failure without matching on message text. Transaction-layer
failures keep the underlying exception in ``cause``.
"""

from typing import Optional


class BridgeError(Exception):
    """Base exception for all bridge client errors."""

    code = "bridge_error"

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.message = message
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class ConfigurationError(BridgeError):
    """Invalid or inconsistent configuration."""

    code = "configuration_error"


class InvalidAddressError(BridgeError):
    """Malformed address, or a transparent address failing its checksum."""

    code = "invalid_address"


class InvalidAmountError(BridgeError):
    """Amount string that cannot be converted to base units exactly."""

    code = "invalid_amount"


class UnsupportedChainError(BridgeError):
    """Selected chain is not in the registry."""

    code = "unsupported_chain"

    def __init__(self, chain_id: str):
        self.chain_id = chain_id
        super().__init__(f"No deployment configured for chain {chain_id}")


class NotReadyError(BridgeError):
    """Contract bindings are not resolved yet (no wallet, chain or dApp)."""

    code = "not_ready"


class WalletError(BridgeError):
    """Raised by wallet adapters when the provider rejects a request."""

    code = "wallet_error"


class DepositFailedError(BridgeError):
    """Deposit transaction could not be submitted."""

    code = "deposit_failed"


class RelayFailedError(BridgeError):
    """Relay transaction was rejected, reverted or never confirmed."""

    code = "relay_failed"


class InputRejectedError(BridgeError):
    """Generic input submission was rejected."""

    code = "input_rejected"


class VoucherExecutionError(BridgeError):
    """Voucher execution was rejected."""

    code = "voucher_failed"

"""Withdraw command derivation.

Withdrawing from the rollup is done from a Zcash wallet (e.g. zingo-cli):
the user sends zatoshis to the rollup exit address with the Ethereum
recipient as memo. The rollup burns them and emits a voucher paying
``amount * 10^10`` wei to that recipient.
"""

from dataclasses import dataclass

from cartezcash_bridge.amounts import ETHER_DECIMALS, WEI_PER_ZATOSHI, parse_units


@dataclass(frozen=True)
class WithdrawCommand:
    """A ready-to-run withdraw command."""
    exit_address: str
    amount_base_units: int      # zatoshis
    destination_hex: str        # Ethereum recipient without 0x

    @property
    def command(self) -> str:
        return f"send {self.exit_address} {self.amount_base_units} {self.destination_hex}"

    def __str__(self) -> str:
        return self.command


def strip_hex_prefix(value: str) -> str:
    if value[:2] in ("0x", "0X"):
        return value[2:]
    return value


class WithdrawCommandBuilder:
    """Derives the withdraw command from amount and destination.

    Pure and uncached: every call recomputes from its inputs.
    """

    def __init__(self, scale_factor: int = WEI_PER_ZATOSHI, decimals: int = ETHER_DECIMALS):
        """Initialize builder.

        Args:
            scale_factor: Divisor from native base units to rollup units
            decimals: Decimals of the native asset
        """
        if scale_factor <= 0:
            raise ValueError("scale_factor must be positive")
        self.scale_factor = scale_factor
        self.decimals = decimals

    def build(self, exit_address: str, amount_native: str, destination_hex: str) -> WithdrawCommand:
        """Build the withdraw command.

        Args:
            exit_address: Rollup exit transparent address
            amount_native: Amount in the native asset, e.g. "1.0"
            destination_hex: Ethereum recipient, with or without 0x

        Returns:
            WithdrawCommand

        Raises:
            InvalidAmountError: If the amount is not a valid decimal
        """
        base_units = parse_units(amount_native, self.decimals)
        return WithdrawCommand(
            exit_address=exit_address,
            amount_base_units=base_units // self.scale_factor,
            destination_hex=strip_hex_prefix(destination_hex),
        )

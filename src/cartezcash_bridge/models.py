"""Value types passed between the UI layer and the orchestrator."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DepositIntent:
    """Request to bridge Ether into the rollup.

    Created per user submission and consumed immediately; never persisted.
    """
    amount_native: str      # Decimal string, e.g. "0.5"
    destination: str        # Zcash transparent address (t1...)


@dataclass(frozen=True)
class Voucher:
    """A voucher emitted by the rollup, as listed by its GraphQL reader.

    Attributes:
        destination: Contract the voucher calls on the base chain
        payload: ABI-encoded call data
        input_index: Index of the input that produced the voucher
        output_index: Index of the voucher within that input
        proof: Validity proof (None until the epoch is finalized)
    """
    destination: str
    payload: bytes
    input_index: int
    output_index: int
    proof: Optional[dict] = None

    @property
    def is_executable(self) -> bool:
        return self.proof is not None

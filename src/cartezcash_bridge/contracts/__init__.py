"""Rollup contract ABIs and per-chain bindings."""

from cartezcash_bridge.contracts.bindings import ContractBindingSet, bind

__all__ = ["ContractBindingSet", "bind"]

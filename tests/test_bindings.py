"""Tests for rollup contract bindings."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from cartezcash_bridge.chains import (
    DAPP_ADDRESS_RELAY_ADDRESS,
    ETHER_PORTAL_ADDRESS,
    INPUT_BOX_ADDRESS,
)
from cartezcash_bridge.contracts import bind
from cartezcash_bridge.contracts.bindings import proof_to_tuple
from cartezcash_bridge.errors import NotReadyError

from conftest import LOCAL_DAPP, LOCALHOST, SEPOLIA, sample_proof

PAYLOAD = bytes(range(20))


class TestBind:
    """Tests for bind()."""

    def test_bind_localhost(self, registry, wallet):
        bindings = bind(registry.resolve(LOCALHOST), wallet)

        assert bindings.chain_id == LOCALHOST
        assert bindings.dapp_address == LOCAL_DAPP
        assert bindings.ether_portal.address == ETHER_PORTAL_ADDRESS
        assert bindings.relay.address == DAPP_ADDRESS_RELAY_ADDRESS
        assert bindings.input_box.address == INPUT_BOX_ADDRESS
        assert bindings.dapp.address == LOCAL_DAPP

    def test_bind_does_not_touch_wallet(self, registry, wallet):
        bind(registry.resolve(LOCALHOST), wallet)
        assert wallet.sent == []

    def test_bind_without_dapp(self, registry, wallet):
        """Test that a chain without a dApp deployment cannot be bound."""
        with pytest.raises(NotReadyError):
            bind(registry.resolve(SEPOLIA), wallet)

    def test_bind_with_dapp_override(self, registry, wallet):
        bindings = bind(registry.resolve(SEPOLIA), wallet, LOCAL_DAPP.lower())

        assert bindings.dapp_address == LOCAL_DAPP
        assert bindings.matches(SEPOLIA, LOCAL_DAPP)
        assert not bindings.matches(LOCALHOST, LOCAL_DAPP)


class TestHandles:
    """Tests for the per-role contract handles."""

    @pytest.mark.asyncio
    async def test_deposit_ether(self, registry, wallet):
        bindings = bind(registry.resolve(LOCALHOST), wallet)

        handle = await bindings.ether_portal.deposit_ether(LOCAL_DAPP, PAYLOAD, 10**18)

        request = wallet.sent[0]
        assert request.to == ETHER_PORTAL_ADDRESS
        assert request.value == 10**18
        assert handle.tx_hash.startswith("0x")

        fn, params = bindings.ether_portal.contract.decode_function_input(request.data)
        assert fn.fn_name == "depositEther"
        assert params["_dapp"] == LOCAL_DAPP
        assert params["_execLayerData"] == PAYLOAD

    @pytest.mark.asyncio
    async def test_relay_dapp_address(self, registry, wallet):
        bindings = bind(registry.resolve(LOCALHOST), wallet)

        await bindings.relay.relay_dapp_address(LOCAL_DAPP)

        request = wallet.sent[0]
        assert request.to == DAPP_ADDRESS_RELAY_ADDRESS
        assert request.value == 0

        fn, params = bindings.relay.contract.decode_function_input(request.data)
        assert fn.fn_name == "relayDAppAddress"
        assert params["_dapp"] == LOCAL_DAPP

    @pytest.mark.asyncio
    async def test_add_input(self, registry, wallet):
        bindings = bind(registry.resolve(LOCALHOST), wallet)

        await bindings.input_box.add_input(LOCAL_DAPP, b"\xde\xad\xbe\xef")

        request = wallet.sent[0]
        assert request.to == INPUT_BOX_ADDRESS

        fn, params = bindings.input_box.contract.decode_function_input(request.data)
        assert fn.fn_name == "addInput"
        assert params["_input"] == b"\xde\xad\xbe\xef"

    @pytest.mark.asyncio
    async def test_execute_voucher(self, registry, wallet):
        bindings = bind(registry.resolve(LOCALHOST), wallet)

        await bindings.dapp.execute_voucher(ETHER_PORTAL_ADDRESS, b"\x01\x02", sample_proof())

        request = wallet.sent[0]
        assert request.to == LOCAL_DAPP

        fn, params = bindings.dapp.contract.decode_function_input(request.data)
        assert fn.fn_name == "executeVoucher"
        assert params["_destination"] == ETHER_PORTAL_ADDRESS
        assert params["_payload"] == b"\x01\x02"

    @pytest.mark.asyncio
    async def test_was_voucher_executed(self, registry, wallet):
        bindings = bind(registry.resolve(LOCALHOST), wallet)
        contract = MagicMock()
        contract.functions.wasVoucherExecuted.return_value.call = AsyncMock(return_value=True)
        bindings.dapp.contract = contract

        assert await bindings.dapp.was_voucher_executed(3, 1)
        contract.functions.wasVoucherExecuted.assert_called_once_with(3, 1)


class TestProofToTuple:
    """Tests for proof_to_tuple."""

    def test_field_order_and_bytes(self):
        validity, context = proof_to_tuple(sample_proof())

        assert validity[0] == 0
        assert validity[2] == b"\x11" * 32
        assert validity[6] == [b"\x55" * 32]
        assert len(validity[7]) == 2
        assert context == b""

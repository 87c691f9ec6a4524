"""Tests for the command line entry point."""

from unittest.mock import patch

import base58

from cartezcash_bridge.address import P2PKH_MAINNET
from cartezcash_bridge.chains import DEFAULT_EXIT_ADDRESS
from cartezcash_bridge.cli import main

from conftest import ACCOUNT, FakeWallet

PUBKEY_HASH = bytes(range(20))
T_ADDRESS = base58.b58encode_check(P2PKH_MAINNET + PUBKEY_HASH).decode("ascii")


class TestOfflineCommands:
    """Commands that never talk to a node."""

    def test_chains(self, capsys):
        assert main(["chains"]) == 0

        out = capsys.readouterr().out
        assert "0x7a69\tlocalhost" in out
        assert "Sepolia Test Network" in out

    def test_decode_address(self, capsys):
        assert main(["decode-address", T_ADDRESS]) == 0
        assert capsys.readouterr().out.strip() == "0x" + PUBKEY_HASH.hex()

    def test_decode_invalid_address(self, capsys):
        assert main(["decode-address", T_ADDRESS[:-1]]) == 1
        assert "invalid_address" in capsys.readouterr().err

    def test_withdraw_command(self, capsys):
        assert main(["withdraw-command", "1.0", ACCOUNT]) == 0

        out = capsys.readouterr().out.strip()
        assert out == f"send {DEFAULT_EXIT_ADDRESS} 100000000 {ACCOUNT[2:]}"

    def test_withdraw_command_unknown_chain(self, capsys):
        assert main(["withdraw-command", "1.0", ACCOUNT, "--chain", "0x1"]) == 1
        assert "unsupported_chain" in capsys.readouterr().err


class TestContractCommands:
    """Commands that send transactions, run against a fake wallet."""

    def test_deposit(self, capsys):
        wallet = FakeWallet()
        with patch("cartezcash_bridge.cli.get_wallet", return_value=wallet):
            assert main(["deposit", "0.5", T_ADDRESS, "--wait"]) == 0

        out = capsys.readouterr().out
        assert wallet.sent[0].value == 5 * 10**17
        assert "success" in out

    def test_relay(self, capsys):
        wallet = FakeWallet()
        with patch("cartezcash_bridge.cli.get_wallet", return_value=wallet):
            assert main(["relay"]) == 0

        assert len(wallet.sent) == 1
        assert capsys.readouterr().out.startswith("0x")

    def test_submit_input(self):
        wallet = FakeWallet()
        with patch("cartezcash_bridge.cli.get_wallet", return_value=wallet):
            assert main(["submit-input", "0xdeadbeef"]) == 0

        assert len(wallet.sent) == 1

    def test_deposit_on_unsupported_chain(self, capsys):
        wallet = FakeWallet(chain_id="0x1")
        with patch("cartezcash_bridge.cli.get_wallet", return_value=wallet):
            assert main(["deposit", "0.5", T_ADDRESS]) == 1

        assert wallet.sent == []
        assert "No deployment configured for chain 0x1" in capsys.readouterr().err

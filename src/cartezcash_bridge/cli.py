"""Command line entry point.

Usage:
    cartezcash-bridge chains
    cartezcash-bridge decode-address t1...
    cartezcash-bridge withdraw-command 1.5 0xRecipient [--chain 0x7a69]
    cartezcash-bridge deposit 1.5 t1... [--chain 0x7a69] [--wait]
    cartezcash-bridge relay [--chain 0x7a69]
    cartezcash-bridge submit-input 0xdeadbeef
    cartezcash-bridge submit-tx <zcash tx hex> [--withdraw-address 0x...]

Contract commands sign with WALLET_PRIVATE_KEY when set, otherwise with the
first account unlocked on the chain's node.
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from cartezcash_bridge.address import AddressCodec
from cartezcash_bridge.chains import ChainRegistry, load_registry
from cartezcash_bridge.config import Settings, get_settings
from cartezcash_bridge.errors import BridgeError
from cartezcash_bridge.models import DepositIntent
from cartezcash_bridge.orchestrator import TransferOrchestrator
from cartezcash_bridge.wallet import TxHandle, get_wallet
from cartezcash_bridge.withdraw import WithdrawCommandBuilder

logger = logging.getLogger(__name__)

DEFAULT_CHAIN = "0x7a69"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cartezcash-bridge",
        description="Move Ether between an EVM chain and the CarteZcash rollup",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("chains", help="List configured chains")

    p = sub.add_parser("decode-address", help="Show the deposit payload of a t-address")
    p.add_argument("address")

    p = sub.add_parser("withdraw-command", help="Print the zingo-cli withdraw command")
    p.add_argument("amount", help="Amount in Ether")
    p.add_argument("destination", help="Ethereum recipient address")
    p.add_argument("--chain", default=DEFAULT_CHAIN, help="Chain id (hex or decimal)")

    def add_contract_options(p: argparse.ArgumentParser) -> None:
        p.add_argument("--chain", default=DEFAULT_CHAIN, help="Chain id (hex or decimal)")
        p.add_argument("--dapp", help="dApp address (overrides configuration)")
        p.add_argument("--wait", action="store_true", help="Wait for the receipt")

    p = sub.add_parser("deposit", help="Deposit Ether to a transparent address")
    p.add_argument("amount", help="Amount in Ether")
    p.add_argument("destination", help="Zcash transparent address")
    add_contract_options(p)

    p = sub.add_parser("relay", help="Relay the dApp address to the rollup")
    add_contract_options(p)

    p = sub.add_parser("submit-input", help="Send a raw hex input to the dApp")
    p.add_argument("payload", help="Hex payload")
    add_contract_options(p)

    p = sub.add_parser("submit-tx", help="Send a serialized Zcash transaction")
    p.add_argument("transaction", help="Transaction hex")
    p.add_argument("--withdraw-address", help="Recipient of burned funds")
    add_contract_options(p)

    return parser


def cmd_chains(registry: ChainRegistry) -> None:
    for chain in registry.list():
        print(f"{chain.chain_id}\t{chain.label}\t{chain.native_token}\t{chain.rpc_url}")
        print(f"\tdApp: {chain.dapp_address or '(not set)'}")
        print(f"\texit: {chain.exit_address}")


def cmd_decode_address(settings: Settings, address: str) -> None:
    payload = AddressCodec(settings.address_prefixes).decode(address)
    print(f"0x{payload.hex()}")


def cmd_withdraw_command(registry: ChainRegistry, args: argparse.Namespace) -> None:
    chain = registry.resolve(args.chain)
    command = WithdrawCommandBuilder(decimals=chain.decimals).build(
        chain.exit_address, args.amount, args.destination
    )
    print(command.command)


async def _report(handle: TxHandle, wait: bool) -> None:
    print(handle.tx_hash)
    if wait:
        receipt = await handle.wait()
        status = "success" if receipt.succeeded else "reverted"
        print(f"block {receipt.block_number}: {status}")


async def run_contract_command(
    settings: Settings, registry: ChainRegistry, args: argparse.Namespace
) -> None:
    chain = registry.resolve(args.chain)
    wallet = get_wallet(chain, settings)
    orchestrator = TransferOrchestrator(registry, wallet, settings)
    if args.dapp:
        orchestrator.set_dapp_address(args.dapp)
    await orchestrator.sync()

    if args.command == "deposit":
        handle = await orchestrator.deposit(DepositIntent(args.amount, args.destination))
    elif args.command == "relay":
        handle = await orchestrator.relay_address()
        logger.info(f"Relay state: {orchestrator.relay_state.value}")
    elif args.command == "submit-input":
        handle = await orchestrator.submit_raw_input(args.payload)
    else:
        handle = await orchestrator.submit_transaction(args.transaction, args.withdraw_address)

    await _report(handle, args.wait)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    settings = get_settings()

    log_level = logging.DEBUG if (settings.debug or args.verbose) else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.debug(f"Settings: {settings.get_safe_dict()}")

    try:
        registry = load_registry(settings.chains_file)

        if args.command == "chains":
            cmd_chains(registry)
        elif args.command == "decode-address":
            cmd_decode_address(settings, args.address)
        elif args.command == "withdraw-command":
            cmd_withdraw_command(registry, args)
        else:
            asyncio.run(run_contract_command(settings, registry, args))

    except BridgeError as e:
        print(f"Error [{e.code}]: {e}", file=sys.stderr)
        return 1

    return 0

from __future__ import annotations

import argparse
import locale
import logging
import os
import sys
from typing import Optional

from rich.console import Console

from .classify import is_address
from .cluster import Cluster, cluster_from_genesis_hash, default_endpoint, parse_url_option
from .config import CliConfig, load_config, load_keypair_pubkey
from .errors import RpcError, UnrecognizedInput
from .explorer import build_link, link_for_entity
from .inspector import run_inspect
from .logger import configure_logging
from .render import error, warn
from .rpc import RpcClient
from .util import lamports_to_sol, resolve_tilde
from .validator import (
    build_test_validator_command,
    local_rpc_url,
    run_test_validator,
    running_test_validator_command,
)

log = logging.getLogger(__name__)

_BALANCE_CLUSTERS = (Cluster.MAINNET_BETA, Cluster.DEVNET, Cluster.TESTNET)


def _cmd_inspect(args: argparse.Namespace, config: CliConfig, console: Console) -> int:
    if not args.input:
        console.print("Provide an account address, transaction signature, block number or explorer url.")
        console.print("Example: mucho inspect <INPUT> --url devnet")
        return 0
    return run_inspect(args.input, args.url, config, console)


def _resolve_balance_address(value: Optional[str], config: CliConfig) -> str:
    if not value:
        return load_keypair_pubkey(config.keypair_path)
    if is_address(value):
        return value
    if os.path.isfile(resolve_tilde(value)):
        return load_keypair_pubkey(value)
    raise UnrecognizedInput("Unable to parse the provided address")


def _cmd_balance(args: argparse.Namespace, config: CliConfig, console: Console) -> int:
    address = _resolve_balance_address(args.address, config)

    endpoints = [(str(cluster), default_endpoint(cluster)) for cluster in _BALANCE_CLUSTERS]
    validator = running_test_validator_command()
    if validator:
        endpoints.append((str(Cluster.LOCALHOST), local_rpc_url(validator)))

    console.print(f"Address: {address}")
    console.print("Balances for address:")
    with console.status("Getting balances"):
        lines = []
        for name, url in endpoints:
            try:
                lamports = RpcClient(url, commitment=config.commitment).get_balance(address)
            except RpcError as exc:
                log.warning("Unable to get the %s balance: %s", name, exc)
                lines.append(f"  - {name}: unavailable")
                continue
            lines.append(f"  - {name}: {lamports_to_sol(lamports)} SOL")
    for line in lines:
        console.print(line, highlight=False)

    console.print(f"Is test-validator running? {'yes' if validator else 'no'}")
    if validator:
        console.print(f"Localnet url: {local_rpc_url(validator)}")
    return 0


def _validator_authority(config: CliConfig) -> Optional[str]:
    if not os.path.isfile(resolve_tilde(config.keypair_path)):
        log.debug("no authority keypair at %s", config.keypair_path)
        return None
    return load_keypair_pubkey(config.keypair_path)


def _cmd_validator(args: argparse.Namespace, config: CliConfig, console: Console) -> int:
    account_dir = args.account_dir or config.account_dir
    if not os.path.isdir(resolve_tilde(account_dir)):
        warn(console, f"Accounts directory does not exist: {account_dir}")
        warn(console, "Skipping loading of fixtures")

    cmd = build_test_validator_command(
        reset=args.reset,
        ledger_dir=args.ledger or config.ledger_dir,
        account_dir=account_dir,
        authority=_validator_authority(config),
        extra_args=args.extra,
    )
    if args.output_only or args.show_command:
        console.print(" ".join(cmd), highlight=False, soft_wrap=True)
    if args.output_only:
        return 0

    console.print("\nSolana Explorer for your local test validator:")
    console.print(build_link(Cluster.LOCALHOST), highlight=False)
    return run_test_validator(cmd)


def _cmd_explorer(args: argparse.Namespace, config: CliConfig, console: Console) -> int:
    target = parse_url_option(args.url, *config.rpc_fallbacks)
    value = args.value
    if args.kind == "block":
        try:
            value = int(value)
        except ValueError:
            raise UnrecognizedInput(f"Invalid block number: {args.value}") from None
    console.print(link_for_entity(target.ref, args.kind, value), highlight=False)
    return 0


def _cmd_cluster(args: argparse.Namespace, config: CliConfig, console: Console) -> int:
    target = parse_url_option(args.url, *config.rpc_fallbacks)
    genesis_hash = RpcClient(target.url, commitment=config.commitment).get_genesis_hash()
    console.print(f"RPC url: {target.url}", highlight=False)
    console.print(f"Genesis hash: {genesis_hash}", highlight=False)
    console.print(f"Cluster: {cluster_from_genesis_hash(genesis_hash)}")
    return 0


def _add_url_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-u",
        "--url",
        help="URL for the Solana JSON RPC or a moniker (mainnet-beta, devnet, testnet, localhost)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=os.path.basename(sys.argv[0]) or "mucho")
    parser.add_argument("-C", "--config", help="Path to a Solana.toml config file")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_inspect = sub.add_parser("inspect", help="Inspect an account, transaction or block")
    p_inspect.add_argument("input", nargs="?", help="Address, signature, block number or explorer url")
    _add_url_option(p_inspect)
    p_inspect.set_defaults(func=_cmd_inspect)

    p_balance = sub.add_parser("balance", help="Get the balances for an account")
    p_balance.add_argument("address", nargs="?", help="Base58 address or path to a keypair json file")
    p_balance.set_defaults(func=_cmd_balance)

    p_validator = sub.add_parser("validator", help="Run the Solana test validator")
    p_validator.add_argument("--reset", action="store_true", help="Reset the ledger to genesis")
    p_validator.add_argument("--ledger", help="Ledger directory")
    p_validator.add_argument("--account-dir", help="Directory of account and program fixtures")
    p_validator.add_argument(
        "--output-only",
        action="store_true",
        help="Print the validator command instead of running it",
    )
    p_validator.add_argument(
        "--show-command",
        action="store_true",
        help="Print the validator command before running it",
    )
    p_validator.add_argument("extra", nargs=argparse.REMAINDER, help="Arguments passed through to the validator")
    p_validator.set_defaults(func=_cmd_validator)

    p_explorer = sub.add_parser("explorer", help="Print a Solana Explorer link")
    p_explorer.add_argument("kind", choices=["address", "tx", "block"], help="Entity kind")
    p_explorer.add_argument("value", help="Address, signature or block number")
    _add_url_option(p_explorer)
    p_explorer.set_defaults(func=_cmd_explorer)

    p_cluster = sub.add_parser("cluster", help="Show the RPC endpoint and detected cluster")
    _add_url_option(p_cluster)
    p_cluster.set_defaults(func=_cmd_cluster)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        # block numbers and amounts follow the user's grouping separator
        locale.setlocale(locale.LC_NUMERIC, "")
    except locale.Error:
        log.debug("unable to load the user numeric locale, using defaults")
    console = Console()
    error_log = configure_logging(verbose=args.verbose)
    try:
        config = load_config(args.config)
        return args.func(args, config, console)
    except FileNotFoundError as exc:
        error(console, str(exc))
        return 1
    except ValueError as exc:
        error(console, str(exc))
        return 1
    except RpcError as exc:
        log.error("RPC request failed: %s", exc)
        error(console, str(exc), heading="RPC request failed")
        return 1
    finally:
        written = error_log.written
        error_log.close()
        if written:
            print(f"Error log written to: {error_log.path}", file=sys.stderr)


if __name__ == "__main__":
    raise SystemExit(main())

"""Inspector: a block explorer for the terminal."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Optional, Tuple

from rich.console import Console

from .classify import AddressTarget, BlockTarget, Classification, SignatureTarget, classify
from .cluster import RpcTarget, parse_url_option, target_for
from .config import CliConfig
from .errors import EntityNotFound
from .explorer import build_link
from .models import Block
from .program_logs import parse_program_logs
from .render import accounts_table, print_logs, rows_table, title
from .report import (
    account_overview,
    block_overview,
    transaction_accounts,
    transaction_overview,
    transaction_status,
)
from .rpc import RpcClient

log = logging.getLogger(__name__)


def select_target(classification: Classification, url_option: Optional[str], config: CliConfig) -> RpcTarget:
    if url_option:
        return parse_url_option(url_option)
    if classification.cluster is not None:
        return target_for(classification.cluster)
    return parse_url_option(None, *config.rpc_fallbacks)


def inspect_address(client: RpcClient, target: RpcTarget, address: str, console: Console) -> None:
    info = client.get_account_info(address)
    if info is None:
        raise EntityNotFound("account", address, build_link(target.ref, address=address))
    console.print(rows_table("Account Overview", account_overview(info)))
    console.print(build_link(target.ref, address=address))


def inspect_signature(
    client: RpcClient,
    target: RpcTarget,
    signature: str,
    console: Console,
    now: Optional[datetime] = None,
) -> None:
    tx = client.get_transaction(signature)
    if tx is None:
        raise EntityNotFound("transaction", signature, build_link(target.ref, transaction=signature))

    console.print(accounts_table(transaction_accounts(tx), ok=tx.succeeded))
    console.print(
        rows_table("Transaction Overview", transaction_overview(tx, now), transaction_status(tx), tx.succeeded)
    )
    groups = parse_program_logs(tx.meta.log_messages, tx.meta.err)
    if groups:
        title(console, "Program Logs")
        print_logs(console, groups)
    console.print(build_link(target.ref, transaction=signature))


def fetch_block(client: RpcClient, slot: int) -> Tuple[Optional[Block], Optional[str]]:
    """Fetch the block and its leader concurrently."""
    with ThreadPoolExecutor(max_workers=2) as pool:
        block_future = pool.submit(client.get_block, slot)
        leader_future = pool.submit(client.get_slot_leader, slot)
        block = block_future.result()
        if block is None:
            leader_future.cancel()
            return None, None
        return block, leader_future.result()


def inspect_block(
    client: RpcClient,
    target: RpcTarget,
    slot: int,
    console: Console,
    now: Optional[datetime] = None,
) -> None:
    with console.status("Fetching block, this could take a few moments"):
        block, leader = fetch_block(client, slot)
    if block is None:
        raise EntityNotFound("block", str(slot), build_link(target.ref, block=slot))
    console.print(rows_table("Block Overview", block_overview(block, leader, now)))
    console.print(build_link(target.ref, block=slot))


def run_inspect(raw: str, url_option: Optional[str], config: CliConfig, console: Console) -> int:
    classification = classify(raw)
    target = select_target(classification, url_option, config)
    log.debug("inspecting %s on %s (%s)", classification.target, target.url, target.cluster or "custom")
    client = RpcClient(target.url, commitment=config.commitment)

    item = classification.target
    if isinstance(item, AddressTarget):
        inspect_address(client, target, item.address, console)
    elif isinstance(item, SignatureTarget):
        inspect_signature(client, target, item.signature, console)
    elif isinstance(item, BlockTarget):
        inspect_block(client, target, item.block, console)
    return 0

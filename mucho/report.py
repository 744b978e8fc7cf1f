"""Label/value report rows for accounts, transactions and blocks.

Builders take already-fetched snapshots and never perform I/O. Optional
values that are absent are reported with a warning style instead of being
left out.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import FrozenSet, List, Optional

from .budget import compute_budget, uses_compute_budget
from .constants import DEFAULT_UNITS_PER_INSTRUCTION, VOTE_PROGRAM_ID
from .models import AccountInfo, Block, LoadedAddresses, Message, Transaction
from .program_logs import describe_transaction_error
from .util import format_number, format_percent, format_timestamp, lamports_to_sol

STYLE_WARNING = "warning"


@dataclass(frozen=True)
class Row:
    label: str
    value: str
    style: Optional[str] = None


class Role(str, Enum):
    FEE_PAYER = "Fee Payer"
    SIGNER = "Signer"
    WRITABLE = "Writable"
    PROGRAM = "Program"


_ROLE_ORDER = (Role.FEE_PAYER, Role.SIGNER, Role.WRITABLE, Role.PROGRAM)


@dataclass(frozen=True)
class AccountEntry:
    index: int
    address: str
    roles: FrozenSet[Role]
    lookup_table: bool = False

    @property
    def details(self) -> str:
        labels = ["Address Lookup Table"] if self.lookup_table else []
        labels.extend(role.value for role in _ROLE_ORDER if role in self.roles)
        return ", ".join(labels)


def _timestamp_row(block_time: Optional[int], now: Optional[datetime]) -> Row:
    if block_time is None:
        return Row("Timestamp", "unknown", STYLE_WARNING)
    return Row("Timestamp", format_timestamp(block_time, now))


def account_overview(info: AccountInfo) -> List[Row]:
    return [
        Row("Owner", info.owner),
        Row("Executable", "yes" if info.executable else "no"),
        Row("Balance (lamports)", format_number(info.lamports)),
        Row("Balance (SOL)", lamports_to_sol(info.lamports, fixed=True)),
        Row("Space (bytes)", format_number(info.space)),
    ]


def transaction_status(tx: Transaction) -> str:
    return "SUCCESS" if tx.succeeded else "FAILED"


def transaction_overview(tx: Transaction, now: Optional[datetime] = None) -> List[Row]:
    budget = compute_budget(tx)
    rows = [
        _timestamp_row(tx.block_time, now),
        Row("Version", tx.version),
        Row("Slot", format_number(tx.slot)),
        Row("Fee (SOL)", "~" + lamports_to_sol(tx.meta.fee)),
        Row("Compute units consumed", format_number(budget.units_consumed)),
    ]

    requested = budget.unit_limit if budget.unit_limit is not None else budget.units_requested
    if requested is not None:
        rows.append(Row("Compute units requested", format_number(requested)))
    else:
        fallback = DEFAULT_UNITS_PER_INSTRUCTION * len(tx.message.instructions)
        rows.append(
            Row("Compute units requested", f"NONE SET - fallback to {format_number(fallback)}", STYLE_WARNING)
        )

    if budget.unit_price is not None:
        rows.append(Row("Compute unit price (in microLamports)", format_number(budget.unit_price)))
    else:
        rows.append(Row("Compute unit price (in microLamports)", "NONE", STYLE_WARNING))

    if tx.meta.err is not None:
        rows.append(Row("Error", describe_transaction_error(tx.meta.err), STYLE_WARNING))
    return rows


def account_roles(message: Message, loaded: LoadedAddresses = LoadedAddresses()) -> List[AccountEntry]:
    header = message.header
    total = len(message.account_keys)
    signers = header.num_required_signatures
    writable_signers = signers - header.num_readonly_signed_accounts
    writable_unsigned = total - signers - header.num_readonly_unsigned_accounts
    program_indexes = {ix.program_id_index for ix in message.instructions}

    entries: List[AccountEntry] = []
    for index, address in enumerate(message.account_keys):
        roles = set()
        if index == 0:
            roles.add(Role.FEE_PAYER)
        if index < signers:
            roles.add(Role.SIGNER)
        if index in program_indexes:
            roles.add(Role.PROGRAM)
        elif index < writable_signers or (index >= signers and index - signers < writable_unsigned):
            # invoked programs are demoted to read-only by the runtime
            roles.add(Role.WRITABLE)
        entries.append(AccountEntry(index, address, frozenset(roles)))

    index = total
    for address in loaded.writable:
        entries.append(AccountEntry(index, address, frozenset({Role.WRITABLE}), lookup_table=True))
        index += 1
    for address in loaded.readonly:
        entries.append(AccountEntry(index, address, frozenset(), lookup_table=True))
        index += 1
    return entries


def transaction_accounts(tx: Transaction) -> List[AccountEntry]:
    return account_roles(tx.message, tx.meta.loaded_addresses)


def _count_row(label: str, count: int, total: int) -> Row:
    return Row(label, f"{format_number(count)} ({format_percent(count, total)})")


def block_overview(block: Block, leader: str, now: Optional[datetime] = None) -> List[Row]:
    txs = block.transactions
    total = len(txs)
    successful = sum(1 for tx in txs if tx.succeeded)
    votes = sum(1 for tx in txs if VOTE_PROGRAM_ID in tx.message.account_keys)
    budgeted = sum(1 for tx in txs if uses_compute_budget(tx))

    height = format_number(block.block_height) if block.block_height is not None else "unknown"
    return [
        _timestamp_row(block.block_time, now),
        Row("Leader", leader),
        Row("Blockhash", block.blockhash),
        Row("Previous blockhash", block.previous_blockhash),
        Row("Block height", height, None if block.block_height is not None else STYLE_WARNING),
        Row("Parent slot", format_number(block.parent_slot)),
        Row("Total transactions", format_number(total)),
        _count_row("Successful transactions", successful, total),
        _count_row("Failed transactions", total - successful, total),
        _count_row("Vote transactions", votes, total),
        _count_row("Non-vote transactions", total - votes, total),
        _count_row("Compute budget transactions", budgeted, total),
    ]

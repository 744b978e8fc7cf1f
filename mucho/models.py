"""Typed snapshots of fetched accounts, transactions and blocks."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import base58

from .errors import MalformedUpstreamData


def _require(obj: Any, key: str, where: str) -> Any:
    if not isinstance(obj, dict) or key not in obj or obj[key] is None:
        raise MalformedUpstreamData(f"{where} is missing required field '{key}'")
    return obj[key]


def _require_int(obj: Any, key: str, where: str) -> int:
    value = _require(obj, key, where)
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedUpstreamData(f"{where}.{key} must be an integer")
    return value


def _optional_int(obj: Dict[str, Any], key: str) -> Optional[int]:
    value = obj.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedUpstreamData(f"{key} must be an integer when present")
    return value


def _str_list(value: Any, where: str) -> Tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise MalformedUpstreamData(f"{where} must be a list of strings")
    return tuple(value)


@dataclass(frozen=True)
class AccountInfo:
    owner: str
    executable: bool
    lamports: int
    data: bytes
    space: int

    @classmethod
    def from_rpc(cls, value: Dict[str, Any]) -> "AccountInfo":
        where = "account"
        raw = _require(value, "data", where)
        if isinstance(raw, list) and raw:
            encoded, encoding = raw[0], raw[1] if len(raw) > 1 else "base64"
        elif isinstance(raw, str):
            encoded, encoding = raw, "base64"
        else:
            raise MalformedUpstreamData("account.data has an unexpected shape")
        if encoding == "base64":
            data = base64.b64decode(encoded)
        elif encoding == "base58":
            data = base58.b58decode(encoded)
        else:
            raise MalformedUpstreamData(f"account.data uses unsupported encoding {encoding}")
        space = _optional_int(value, "space")
        return cls(
            owner=str(_require(value, "owner", where)),
            executable=bool(_require(value, "executable", where)),
            lamports=_require_int(value, "lamports", where),
            data=data,
            space=len(data) if space is None else space,
        )


@dataclass(frozen=True)
class MessageHeader:
    num_required_signatures: int
    num_readonly_signed_accounts: int
    num_readonly_unsigned_accounts: int


@dataclass(frozen=True)
class CompiledInstruction:
    program_id_index: int
    accounts: Tuple[int, ...]
    data: bytes


@dataclass(frozen=True)
class LoadedAddresses:
    writable: Tuple[str, ...] = ()
    readonly: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Message:
    header: MessageHeader
    account_keys: Tuple[str, ...]
    instructions: Tuple[CompiledInstruction, ...]

    @classmethod
    def from_rpc(cls, value: Dict[str, Any]) -> "Message":
        where = "transaction.message"
        header_raw = _require(value, "header", where)
        header = MessageHeader(
            num_required_signatures=_require_int(header_raw, "numRequiredSignatures", f"{where}.header"),
            num_readonly_signed_accounts=_require_int(
                header_raw, "numReadonlySignedAccounts", f"{where}.header"
            ),
            num_readonly_unsigned_accounts=_require_int(
                header_raw, "numReadonlyUnsignedAccounts", f"{where}.header"
            ),
        )
        account_keys = _str_list(_require(value, "accountKeys", where), f"{where}.accountKeys")
        if len(account_keys) < header.num_required_signatures:
            raise MalformedUpstreamData("accountKeys is shorter than numRequiredSignatures")

        instructions: List[CompiledInstruction] = []
        for idx, ix in enumerate(_require(value, "instructions", where)):
            ix_where = f"{where}.instructions[{idx}]"
            program_id_index = _require_int(ix, "programIdIndex", ix_where)
            if program_id_index >= len(account_keys):
                raise MalformedUpstreamData(f"{ix_where}.programIdIndex is out of range")
            data = ix.get("data") or ""
            try:
                decoded = base58.b58decode(data)
            except ValueError as exc:
                raise MalformedUpstreamData(f"{ix_where}.data is not base58") from exc
            instructions.append(
                CompiledInstruction(
                    program_id_index=program_id_index,
                    accounts=tuple(ix.get("accounts") or ()),
                    data=decoded,
                )
            )
        return cls(header=header, account_keys=account_keys, instructions=tuple(instructions))


@dataclass(frozen=True)
class TransactionMeta:
    err: Any
    fee: int
    compute_units_consumed: int
    log_messages: Tuple[str, ...]
    loaded_addresses: LoadedAddresses

    @classmethod
    def from_rpc(cls, value: Dict[str, Any]) -> "TransactionMeta":
        where = "transaction.meta"
        loaded_raw = value.get("loadedAddresses") or {}
        loaded = LoadedAddresses(
            writable=_str_list(loaded_raw.get("writable") or [], f"{where}.loadedAddresses.writable"),
            readonly=_str_list(loaded_raw.get("readonly") or [], f"{where}.loadedAddresses.readonly"),
        )
        return cls(
            err=value.get("err"),
            fee=_require_int(value, "fee", where),
            compute_units_consumed=_optional_int(value, "computeUnitsConsumed") or 0,
            log_messages=_str_list(value.get("logMessages") or [], f"{where}.logMessages"),
            loaded_addresses=loaded,
        )


@dataclass(frozen=True)
class Transaction:
    signature: str
    slot: int
    block_time: Optional[int]
    version: str
    meta: TransactionMeta
    message: Message

    @property
    def succeeded(self) -> bool:
        return self.meta.err is None

    @classmethod
    def from_rpc(
        cls,
        value: Dict[str, Any],
        slot: Optional[int] = None,
        block_time: Optional[int] = None,
    ) -> "Transaction":
        """Build from a `getTransaction` result or one entry of `getBlock().transactions`."""
        where = "transaction"
        if "meta" not in value or value["meta"] is None:
            raise MalformedUpstreamData("transaction is missing 'meta'")
        tx = _require(value, "transaction", where)
        signatures = _str_list(_require(tx, "signatures", f"{where}.transaction"), "signatures")
        version = value.get("version", "legacy")
        if slot is None:
            slot = _require_int(value, "slot", where)
        if block_time is None:
            block_time = _optional_int(value, "blockTime")
        return cls(
            signature=signatures[0] if signatures else "",
            slot=slot,
            block_time=block_time,
            version="legacy" if version in (None, "legacy") else str(version),
            meta=TransactionMeta.from_rpc(value["meta"]),
            message=Message.from_rpc(_require(tx, "message", f"{where}.transaction")),
        )


@dataclass(frozen=True)
class Block:
    slot: int
    blockhash: str
    previous_blockhash: str
    block_height: Optional[int]
    parent_slot: int
    block_time: Optional[int]
    transactions: Tuple[Transaction, ...] = field(default_factory=tuple)

    @classmethod
    def from_rpc(cls, slot: int, value: Dict[str, Any]) -> "Block":
        where = "block"
        block_time = _optional_int(value, "blockTime")
        txs = tuple(
            Transaction.from_rpc(entry, slot=slot, block_time=block_time)
            for entry in value.get("transactions") or []
        )
        return cls(
            slot=slot,
            blockhash=str(_require(value, "blockhash", where)),
            previous_blockhash=str(_require(value, "previousBlockhash", where)),
            block_height=_optional_int(value, "blockHeight"),
            parent_slot=_require_int(value, "parentSlot", where),
            block_time=block_time,
            transactions=txs,
        )

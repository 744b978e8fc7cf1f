"""Compute budget extraction from transaction instructions."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from typing import Optional

from .constants import (
    CB_REQUEST_HEAP_FRAME,
    CB_REQUEST_UNITS,
    CB_SET_COMPUTE_UNIT_LIMIT,
    CB_SET_COMPUTE_UNIT_PRICE,
    CB_SET_LOADED_ACCOUNTS_DATA_SIZE_LIMIT,
    COMPUTE_BUDGET_PROGRAM_ID,
)
from .models import Transaction

log = logging.getLogger(__name__)


@dataclass
class ComputeBudget:
    units_consumed: int
    units_requested: Optional[int] = None
    unit_limit: Optional[int] = None
    unit_price: Optional[int] = None  # micro-lamports
    account_data_size_limit: Optional[int] = None
    heap_frame_size: Optional[int] = None


_LAYOUTS = {
    CB_REQUEST_UNITS: ("<BII", "units_requested"),
    CB_REQUEST_HEAP_FRAME: ("<BI", "heap_frame_size"),
    CB_SET_COMPUTE_UNIT_LIMIT: ("<BI", "unit_limit"),
    CB_SET_COMPUTE_UNIT_PRICE: ("<BQ", "unit_price"),
    CB_SET_LOADED_ACCOUNTS_DATA_SIZE_LIMIT: ("<BI", "account_data_size_limit"),
}


def compute_budget(tx: Transaction) -> ComputeBudget:
    """Collect compute budget settings; later instructions of a kind override earlier ones."""
    budget = ComputeBudget(units_consumed=tx.meta.compute_units_consumed)
    keys = tx.message.account_keys
    if COMPUTE_BUDGET_PROGRAM_ID not in keys:
        return budget
    program_index = keys.index(COMPUTE_BUDGET_PROGRAM_ID)

    for ix in tx.message.instructions:
        if ix.program_id_index != program_index or not ix.data:
            continue
        layout = _LAYOUTS.get(ix.data[0])
        if layout is None:
            log.debug("unknown compute budget instruction %d in %s", ix.data[0], tx.signature)
            continue
        fmt, attr = layout
        try:
            values = struct.unpack_from(fmt, ix.data)
        except struct.error:
            log.debug("short compute budget instruction data in %s", tx.signature)
            continue
        setattr(budget, attr, values[1])
    return budget


def uses_compute_budget(tx: Transaction) -> bool:
    return COMPUTE_BUDGET_PROGRAM_ID in tx.message.account_keys

"""Formatting and parsing helpers for mucho."""

from __future__ import annotations

import locale
import re
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

from .constants import LAMPORTS_PER_SOL

_DIGITS_RE = re.compile(r"^\d+$")

_SECOND = 1
_MINUTE = 60 * _SECOND
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR
_MONTH = 30 * _DAY
_YEAR = 365 * _DAY


def grouping_separator() -> str:
    sep = locale.localeconv().get("thousands_sep")
    return sep if isinstance(sep, str) and sep else ","


def decimal_point() -> str:
    point = locale.localeconv().get("decimal_point")
    return point if isinstance(point, str) and point else "."


def format_number(value: int, separator: str | None = None) -> str:
    sep = separator if separator is not None else grouping_separator()
    return f"{int(value):,}".replace(",", sep)


def number_string_to_int(text: str, separator: str | None = None) -> int:
    """Parse a locale formatted integer such as ``1,234,567`` or ``1.234.567``."""
    sep = separator if separator is not None else grouping_separator()
    cleaned = text.strip().replace(sep, "")
    if not _DIGITS_RE.match(cleaned):
        raise ValueError(f"Not a whole number: {text}")
    return int(cleaned)


def lamports_to_sol(lamports: int, fixed: bool = False, separator: str | None = None) -> str:
    sol = Decimal(int(lamports)) / Decimal(LAMPORTS_PER_SOL)
    whole, _, frac = f"{sol:.9f}".partition(".")
    if not fixed:
        frac = frac.rstrip("0")
    text = format_number(int(whole), separator)
    return f"{text}{decimal_point()}{frac}" if frac else text


def format_percent(part: int, total: int) -> str:
    if total <= 0:
        return "0%"
    return f"{int(part * 100 / total + 0.5)}%"


def word_with_plurality(count: int | float | str, singular: str, plural: str) -> str:
    if isinstance(count, str):
        count = float(count)
    return singular if count == 1 else plural


def time_ago(moment: datetime, now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    elapsed = (now - moment).total_seconds()
    if elapsed < 0:
        return "in the future"

    for limit, unit, name in (
        (_MINUTE, _SECOND, "second"),
        (_HOUR, _MINUTE, "minute"),
        (_DAY, _HOUR, "hour"),
        (_MONTH, _DAY, "day"),
        (_YEAR, _MONTH, "month"),
    ):
        if elapsed < limit:
            count = int(elapsed / unit + 0.5)
            return f"{count} {word_with_plurality(count, name, name + 's')} ago"
    count = int(elapsed / _YEAR + 0.5)
    return f"{count} {word_with_plurality(count, 'year', 'years')} ago"


def unix_timestamp_to_date(block_time: int) -> datetime:
    return datetime.fromtimestamp(int(block_time), tz=timezone.utc)


def format_timestamp(block_time: int, now: datetime | None = None) -> str:
    moment = unix_timestamp_to_date(block_time)
    local = moment.astimezone()
    stamp = local.strftime("%b %d, %Y %I:%M:%S %p %Z").strip()
    return f"{stamp}\n({time_ago(moment, now)})"


def resolve_tilde(path: str) -> str:
    return str(Path(path).expanduser())

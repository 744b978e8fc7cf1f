"""Terminal rendering for report rows and program log groups."""

from __future__ import annotations

from typing import Iterable, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .program_logs import STYLE_ERROR, STYLE_INFO, STYLE_MUTED, STYLE_SUCCESS, InstructionLogs
from .report import STYLE_WARNING, AccountEntry, Row

_LOG_COLORS = {
    STYLE_MUTED: "bright_black",
    STYLE_INFO: "blue",
    STYLE_SUCCESS: "green",
    STYLE_ERROR: "red",
}


def title(console: Console, message: str) -> None:
    console.print(f"[reverse] {escape(message)} [/]")


def warn(console: Console, message: str) -> None:
    console.print(f"[yellow]{escape(message)}[/]")


def error(console: Console, message: str, heading: Optional[str] = None) -> None:
    if heading:
        console.print(f"[white on red] {escape(heading)} [/]")
        console.print(escape(message))
    else:
        console.print(f"[white on red] {escape(message)} [/]")


def rows_table(heading: str, rows: Iterable[Row], status: Optional[str] = None, ok: bool = True) -> Table:
    color = "green" if ok else "red"
    table = Table(header_style=f"bold {color}", show_lines=True)
    table.add_column(heading)
    table.add_column(f"[{color}]{status}[/]" if status else "")
    for row in rows:
        value = escape(row.value)
        if row.style == STYLE_WARNING:
            value = f"[red]{value}[/]"
        table.add_row(escape(row.label), value)
    return table


def accounts_table(entries: Iterable[AccountEntry], ok: bool = True) -> Table:
    table = Table(header_style=f"bold {'green' if ok else 'red'}")
    table.add_column("#", justify="right")
    table.add_column("Address")
    table.add_column("Details")
    for entry in entries:
        table.add_row(str(entry.index + 1), entry.address, entry.details)
    return table


def log_lines(groups: Iterable[InstructionLogs]) -> List[str]:
    """Render log groups as rich markup lines, one header per instruction."""
    lines: List[str] = []
    for number, group in enumerate(groups, start=1):
        program = group.invoked_program or "Unknown program"
        status = "[red]failed[/]" if group.failed else "[green]ok[/]"
        header = f"[bold]#{number} {escape(program)}[/] ({status}"
        if group.compute_units:
            header += f", {group.compute_units:,} compute units"
        lines.append(header + ")")
        for line in group.logs:
            color = _LOG_COLORS.get(line.style, "default")
            lines.append(f"{escape(line.prefix)}[{color}]{escape(line.text)}[/]")
        if group.truncated:
            lines.append("[yellow]Log truncated[/]")
    return lines


def print_logs(console: Console, groups: Iterable[InstructionLogs]) -> None:
    for line in log_lines(groups):
        console.print(line, highlight=False)

"""Console rendering for script output."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from rich.console import Console
from rich.markup import escape
from rich.table import Table

__all__ = ["print_documents", "print_table", "section"]


def _cell(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, float):
        return f"{value:.2f}"
    if isinstance(value, (list, tuple)):
        return ", ".join(_cell(v) for v in value)
    if isinstance(value, Mapping):
        return ", ".join(f"{k}: {_cell(v)}" for k, v in value.items())
    return str(value)


def section(console: Console, title: str) -> None:
    """Print a section heading."""
    console.print(f"\n[bold blue]--- {title} ---[/bold blue]")


def print_table(console: Console, title: str, rows: Iterable[Mapping[str, Any]]) -> None:
    """
    Print rows as a table, one column per key seen in any row.

    Empty input prints the title and a "no results" line instead of an
    empty table.
    """
    rows = list(rows)
    console.print(f"\n[bold]{title}[/bold]")
    if not rows:
        console.print("[yellow](no results)[/yellow]")
        return

    columns: list[str] = []
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)

    table = Table()
    for column in columns:
        table.add_column(column, style="cyan" if column == "_id" else None)
    for row in rows:
        table.add_row(*(escape(_cell(row.get(column))) for column in columns))

    console.print(table)


def print_documents(console: Console, title: str, documents: Iterable[Mapping[str, Any]]) -> None:
    """Print a list of book documents as a table without their ``_id``."""
    print_table(console, title, ({k: v for k, v in doc.items() if k != "_id"} for doc in documents))

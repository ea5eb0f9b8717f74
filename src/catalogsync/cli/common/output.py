"""Output formatting utilities for the CLI."""

from __future__ import annotations

import json
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import questionary
from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from catalogsync.cli.common.tui_style import QUESTIONARY_STYLE_CONFIRM

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {msg}")

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {v}")

    def json(self, payload: Any) -> None:
        """Print a JSON document verbatim (no markup, highlighting or wrapping)."""
        console.print(
            json.dumps(payload, indent=2), markup=False, highlight=False, soft_wrap=True
        )

    def confirm(self, message: str, *, default: bool = False) -> bool:
        """
        Ask the user for confirmation using a standardized Questionary prompt.

        Returns:
            True if the user confirms, False otherwise (including Ctrl-C).
        """
        console.print("[meta]Use y/n then Enter[/]")
        prompt = questionary.confirm(
            f"[catalogsync] {message}",
            default=default,
            style=QUESTIONARY_STYLE_CONFIRM,
            qmark="✦",
            auto_enter=False,
        )
        return bool(prompt.ask())

    def entities_table(self, entities: Iterable[Any], title: str = "Entities") -> None:
        """
        Expects objects with .name .type .owner .annotations
        (like catalogsync.core.entities.CatalogEntity)
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Name", style="ok")
        t.add_column("Type", style="meta")
        t.add_column("Owner", style="meta")
        t.add_column("ARN")

        for e in entities:
            annotations = getattr(e, "annotations", None) or {}
            arn = annotations.get("amazon.com/dynamo-db-table-arn", "")
            t.add_row(e.name, e.type, e.owner, arn)

        console.print(t)

    def failures_table(self, failures: Iterable[Any], title: str = "Failures") -> None:
        """Expects DescribeError-like objects with .table_name."""
        t = Table(title=title, show_lines=False)
        t.add_column("Table", style="ok")
        t.add_column("Error", style="err")

        for f in failures:
            t.add_row(str(getattr(f, "table_name", "")), str(f))

        console.print(t)


out = Out()

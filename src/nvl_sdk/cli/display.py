"""Human-readable rendering of scopes."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from rich.console import Console
from rich.table import Table
from rich.text import Text

from nvl_sdk.schemas import Scope

LABEL_COLUMN = 24
CONTINUATION_INDENT = "\n\t\t\t"


def field_padding(label: str) -> str:
    """Tabs placed between a label and its value so values line up."""
    tabs = "\t"
    diff = LABEL_COLUMN - len(label)
    if diff > 8:
        tabs += "\t"
    if diff > 16:
        tabs += "\t"
    return tabs


def _render_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def format_field(label: str, value: object, style: str | None = None) -> Text | None:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        if not value:
            return None
        items = [_render_value(item) for item in value]
    else:
        items = [_render_value(value)]

    line = Text(label + field_padding(label))
    for index, item in enumerate(items):
        if index:
            line.append(CONTINUATION_INDENT)
        line.append(item, style=style)
    return line


def format_timestamp(value: float | None) -> str | None:
    if value is None:
        return None
    moment = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    return moment.strftime("%a %b %d %Y %H:%M:%S UTC")


def display_field(console: Console, label: str, value: object, style: str | None = None) -> None:
    line = format_field(label, value, style)
    if line is not None:
        console.print(line)


def display_scope(console: Console, scope: Scope) -> None:
    console.print()
    display_field(console, "Name", scope.name, "bold")
    display_field(console, "Description", scope.description)
    display_field(console, "Restricted", scope.restricted)
    display_field(console, "Created", format_timestamp(scope.created))
    display_field(console, "Modified", format_timestamp(scope.modified))


def scope_table(scopes: Iterable[Scope]) -> Table:
    table = Table("Name", "Description", "Restricted")
    for scope in scopes:
        table.add_row(
            Text(scope.name, style="bold"),
            "" if scope.description is None else scope.description,
            "" if scope.restricted is None else _render_value(scope.restricted),
        )
    return table

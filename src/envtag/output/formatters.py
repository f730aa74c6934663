"""Render bind reports, policies, and kind listings.

Human output uses Rich tables; ``--json`` dumps the pydantic models.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from envtag.output.console import create_console, get_output

if TYPE_CHECKING:
    from envtag.domain.policy import FieldPolicy
    from envtag.services.converters import ConverterRegistry
    from envtag.services.report import BindReport


def _value_text(value: Any) -> Text:
    if value is None:
        return Text("unset", style="envtag.unset")
    if isinstance(value, list):
        return Text(json.dumps(value, separators=(",", ":")), style="envtag.value")
    return Text(str(value), style="envtag.value")


def format_report(report: BindReport, *, json_output: bool = False) -> str:
    """Format a bind report for display.

    Args:
        report: The report to format.
        json_output: If True, return JSON; otherwise a Rich-rendered table.
    """
    if json_output:
        return report.model_dump_json(indent=2)

    console = create_console()
    status = Text("OK", style="envtag.ok") if report.ok else Text("ERROR", style="envtag.error")
    console.print(status, Text(f"  {report.record}  ({report.policy})"))

    if report.fields:
        table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
        table.add_column("Field", style="envtag.path")
        table.add_column("Env", style="envtag.key")
        table.add_column("Value")
        for entry in report.fields:
            table.add_row(entry.path, entry.key, _value_text(entry.value))
        console.print(table)

    for error in report.errors:
        console.print(Text(error.code, style="envtag.code"), Text(f"  {error.message}"))

    return get_output(console).rstrip("\n")


def format_policy(policy: FieldPolicy | None, *, json_output: bool = False) -> str:
    if json_output:
        return "null" if policy is None else policy.model_dump_json(indent=2)
    if policy is None or not policy.key:
        return "skipped: no env key"

    console = create_console()
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Directive", style="dim")
    table.add_column("Value")
    for name, value in policy.model_dump().items():
        table.add_row(name, _value_text(value))
    console.print(table)
    return get_output(console).rstrip("\n")


def format_kinds(registry: ConverterRegistry, *, json_output: bool = False) -> str:
    rows = [
        {
            "kind": kind,
            "python_types": [tp.__name__ for tp in registry.python_types(kind)],
            "list_element": registry.get(kind).list_element,
            "bounds": registry.get(kind).parse_bound is not None,
        }
        for kind in registry.kinds()
    ]
    if json_output:
        return json.dumps(rows, indent=2)

    console = create_console()
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    for column in ("Kind", "Python types", "In lists", "Bounds"):
        table.add_column(column)
    for row in rows:
        table.add_row(
            str(row["kind"]),
            ", ".join(row["python_types"]) or "-",
            "yes" if row["list_element"] else "no",
            "yes" if row["bounds"] else "no",
        )
    console.print(table)
    return get_output(console).rstrip("\n")

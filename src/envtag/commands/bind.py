"""Command: bind a record from the current environment and show the result."""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING, Any

import click

from envtag.commands._base import EnvtagCommand

if TYPE_CHECKING:
    from envtag.commands._context import AppContext


def import_target(target: str) -> Any:
    """Import ``package.module:attr`` and return the attribute."""
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise click.BadParameter("expected MODULE:ATTR", param_hint="TARGET")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise click.ClickException(f"Cannot import {module_name}: {exc}") from exc

    obj: Any = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise click.ClickException(f"{module_name} has no attribute {attr}") from None
    return obj


@click.command(
    cls=EnvtagCommand,
    examples="""\
  envtag bind myapp.config:Settings
  PORT=9000 envtag --json bind myapp.config:Settings
  envtag --fail-fast bind myapp.config:Settings""",
)
@click.argument("target")
@click.pass_obj
def bind(app: AppContext, target: str) -> None:
    """Bind TARGET (a record class or instance) from the environment.

    Exits with code 1 when any field fails to bind.
    """
    from envtag.domain.errors import PreconditionError
    from envtag.output.formatters import format_report
    from envtag.services.binder import bind as bind_record
    from envtag.services.report import build_report

    obj = import_target(target)
    record = obj() if isinstance(obj, type) else obj
    try:
        errors = bind_record(record, fail_fast=app.settings.fail_fast)
    except PreconditionError as exc:
        raise click.ClickException(str(exc)) from exc

    report = build_report(record, errors)
    app.emit(format_report(report, json_output=app.json_output), ok=report.ok)

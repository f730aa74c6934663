"""Command: list the registered semantic kinds."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from envtag.commands._base import EnvtagCommand

if TYPE_CHECKING:
    from envtag.commands._context import AppContext


@click.command(cls=EnvtagCommand)
@click.pass_obj
def kinds(app: AppContext) -> None:
    """List field kinds the default registry can bind."""
    from envtag.output.formatters import format_kinds
    from envtag.services.binder import default_registry

    app.emit(format_kinds(default_registry(), json_output=app.json_output))

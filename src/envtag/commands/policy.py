"""Command: show how an ``env`` directive parses."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from envtag.commands._base import EnvtagCommand

if TYPE_CHECKING:
    from envtag.commands._context import AppContext


@click.command(
    cls=EnvtagCommand,
    examples="""\
  envtag policy 'PORT,defVal:8080,min:1,max:65535'
  envtag --json policy 'API_TOKEN,required'""",
)
@click.argument("directive")
@click.pass_obj
def policy(app: AppContext, directive: str) -> None:
    """Parse DIRECTIVE and print the resulting field policy."""
    from envtag.domain.policy import parse_directive
    from envtag.output.formatters import format_policy

    app.emit(format_policy(parse_directive(directive), json_output=app.json_output))

"""Root CLI group for envtag with global flags and command registration."""

from __future__ import annotations

import click

from envtag import __version__
from envtag.commands import register_commands
from envtag.commands._context import AppContext
from envtag.config.settings import EnvtagSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="envtag")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging for field resolution.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("--fail-fast", is_flag=True, help="Stop binding at the first field error.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    fail_fast: bool,
) -> None:
    """envtag — bind environment variables into annotated records."""
    settings = EnvtagSettings.from_cli(
        json_output=json_output,
        verbose=verbose,
        log_json=log_json,
        fail_fast=fail_fast,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)

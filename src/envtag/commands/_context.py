"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``.  Owns logging setup and output emission.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from envtag.config.logging import configure_logging

if TYPE_CHECKING:
    from envtag.config.settings import EnvtagSettings


class AppContext:
    """Settings plus stdout/stderr routing for command output."""

    def __init__(self, settings: EnvtagSettings) -> None:
        self.settings = settings
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def json_output(self) -> bool:
        return self.settings.json_output

    def emit(self, output: str, *, ok: bool = True) -> None:
        """Write *output*; on failure write to stderr and exit with code 1."""
        if ok:
            click.echo(output)
            return
        click.echo(output, err=True)
        raise SystemExit(1)

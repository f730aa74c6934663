"""Subcommand modules for envtag.

Provides register_commands() which uses deferred imports to keep
``envtag --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the standalone commands on the root CLI group."""
    from envtag.commands.bind import bind
    from envtag.commands.kinds import kinds
    from envtag.commands.policy import policy

    cli.add_command(bind)
    cli.add_command(policy)
    cli.add_command(kinds)

"""Subcommand modules for audiocat.

Provides register_commands() which uses deferred imports to keep
``audiocat --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register clip and database commands on the root CLI group."""
    from audiocat.commands.clip import add, autocomplete, delete, export, search, show
    from audiocat.commands.db import check, drop, init_cmd, reindex

    for command in (add, show, delete, search, autocomplete, export):
        cli.add_command(command)
    for command in (init_cmd, check, reindex, drop):
        cli.add_command(command)

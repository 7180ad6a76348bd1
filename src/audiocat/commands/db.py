"""Database commands: init, check, reindex, drop."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from audiocat.services.result import ServiceResult

if TYPE_CHECKING:
    from audiocat.commands._context import AppContext


@click.command("init")
@click.pass_obj
def init_cmd(app: AppContext) -> None:
    """Create the catalog database and search index if missing."""
    app.engine  # noqa: B018  (opening the engine creates the schema)
    app.emit(
        ServiceResult(
            ok=True,
            op="init",
            data={"database": str(app.settings.database_path)},
        )
    )


@click.command()
@click.pass_obj
def check(app: AppContext) -> None:
    """Compare the search index against the catalog table."""
    app.emit(app.catalog.check())


@click.command()
@click.pass_obj
def reindex(app: AppContext) -> None:
    """Rebuild the search index from the catalog table."""
    app.emit(app.catalog.reindex())


@click.command()
@click.confirmation_option(prompt="Drop the catalog and its search index?")
@click.pass_obj
def drop(app: AppContext) -> None:
    """Drop the catalog table and its search index."""
    app.emit(app.catalog.drop())

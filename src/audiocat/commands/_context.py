"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Opens the database lazily so ``--help`` and
``--version`` never touch it, and disposes the engine when the command ends.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from audiocat.errors import StorageError
from audiocat.output.formatters import format_result

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from audiocat.config.settings import AudiocatSettings
    from audiocat.services.catalog import CatalogService
    from audiocat.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: AudiocatSettings) -> None:
        self.settings = settings
        self._engine: Engine | None = None

        from audiocat.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def engine(self) -> Engine:
        """Pooled engine with the schema in place (created on first access)."""
        if self._engine is None:
            from audiocat.infrastructure.database.engine import init_database

            try:
                self._engine = init_database(
                    self.settings.database_path, self.settings.database
                )
            except StorageError as exc:
                raise click.ClickException(str(exc)) from exc
        return self._engine

    @property
    def catalog(self) -> CatalogService:
        from audiocat.services.catalog import CatalogService

        return CatalogService(self.engine, self.settings)

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout; warnings go to stderr in human mode.
        * Failure: writes to stderr, exits with code 1.
        """
        json_output = self.settings.json_output
        output = format_result(result, json_output=json_output)
        if result.ok:
            click.echo(output)
            if not json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

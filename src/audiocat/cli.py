"""Root CLI group for audiocat with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click

from audiocat import __version__
from audiocat.commands import register_commands
from audiocat.commands._context import AppContext
from audiocat.config.settings import AudiocatSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="audiocat")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging to stderr.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--db",
    "db_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Override the catalog database file.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    db_path: Path | None,
) -> None:
    """audiocat — catalog and search short audio clips."""
    settings = AudiocatSettings.from_cli(
        config_path=config_path,
        json_output=json_output or None,
        verbose=verbose or None,
        log_json=log_json or None,
        db_path=db_path,
    )
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)

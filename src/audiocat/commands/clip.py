"""Clip commands: add, show, delete, search, autocomplete, export."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import click

from audiocat.domain.keys import KeyKind, parse_key
from audiocat.domain.records import INT64_MAX
from audiocat.infrastructure.repositories.pagination import OrderBy
from audiocat.services.result import ServiceResult

if TYPE_CHECKING:
    from audiocat.commands._context import AppContext


@click.command()
@click.argument("name")
@click.argument("audio_file", type=click.Path(path_type=Path))
@click.option("--tags", default="", help="Space or comma separated search terms.")
@click.option(
    "--author-id",
    type=click.IntRange(min=0, max=INT64_MAX),
    default=None,
    help="Uploader id.",
)
@click.option("--author-name", default=None, help="Uploader user name.")
@click.option("--author-global-name", default=None, help="Uploader display name.")
@click.pass_obj
def add(
    app: AppContext,
    name: str,
    audio_file: Path,
    tags: str,
    author_id: int | None,
    author_name: str | None,
    author_global_name: str | None,
) -> None:
    """Catalog AUDIO_FILE under NAME."""
    app.emit(
        app.catalog.add_clip(
            name,
            audio_file,
            tags=tags,
            author_id=author_id,
            author_name=author_name,
            author_global_name=author_global_name,
        )
    )


@click.command()
@click.argument("value")
@click.option(
    "--by",
    "kind",
    type=click.Choice([k.value for k in KeyKind]),
    default=KeyKind.NAME.value,
    show_default=True,
    help="Unique column VALUE refers to.",
)
@click.pass_obj
def show(app: AppContext, value: str, kind: str) -> None:
    """Show one clip by name, id, or file path."""
    try:
        key = parse_key(kind, value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="VALUE") from exc
    app.emit(app.catalog.get_clip(key))


@click.command()
@click.argument("audio_file", type=click.Path(path_type=Path))
@click.pass_obj
def delete(app: AppContext, audio_file: Path) -> None:
    """Remove the clip cataloged for AUDIO_FILE."""
    app.emit(app.catalog.delete_clip(audio_file))


@click.command()
@click.argument("query", nargs=-1, required=True)
@click.option("-n", "--limit", type=click.IntRange(min=1), default=None, help="Max results.")
@click.pass_obj
def search(app: AppContext, query: tuple[str, ...], limit: int | None) -> None:
    """Full-text search over clip names, files, and tags."""
    app.emit(app.catalog.search(" ".join(query), limit=limit))


@click.command()
@click.argument("partial", default="")
@click.pass_obj
def autocomplete(app: AppContext, partial: str) -> None:
    """Suggest clip names for partially typed input."""
    app.emit(app.catalog.autocomplete(partial))


@click.command()
@click.option(
    "--order-by",
    type=click.Choice([o.value for o in OrderBy]),
    default=None,
    help="Sort column (default from [pagination] config).",
)
@click.option("--page-size", type=click.IntRange(min=1), default=None, help="Rows per page.")
@click.option(
    "--keyset/--offset",
    "keyset",
    default=None,
    help="Resume pages after the last row seen instead of by offset.",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write clips as JSON lines to this file instead of stdout.",
)
@click.pass_obj
def export(
    app: AppContext,
    order_by: str | None,
    page_size: int | None,
    keyset: bool | None,
    output: Path | None,
) -> None:
    """Export the whole catalog, page by page."""
    if output is None:
        app.emit(app.catalog.export(order_by=order_by, page_size=page_size, keyset=keyset))
        return

    paginator = app.catalog.paginator(order_by=order_by, page_size=page_size, keyset=keyset)
    count = 0
    pages = 0
    with output.open("w", encoding="utf-8") as fh:
        for page in paginator:
            pages += 1
            for record in page:
                fh.write(json.dumps(record.to_dict()) + "\n")
                count += 1
    app.emit(
        ServiceResult(
            ok=True,
            op="export",
            data={
                "order_by": str(paginator.order_by),
                "page_size": paginator.page_size,
                "pages": pages,
                "count": count,
                "output": str(output),
            },
        )
    )

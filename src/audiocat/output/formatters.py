"""Rich/JSON rendering of ServiceResult.

``--json`` dumps the result model verbatim. Human mode prints a status
line, scalar data as key/value pairs, and clip lists as a table.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.table import Table

from audiocat.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from audiocat.services.result import ServiceResult

_CLIP_COLUMNS = ("id", "name", "audio_file_path", "tags", "created_at")


def _render_clips(console: Console, items: list[dict[str, Any]]) -> None:
    table = Table(show_edge=False, pad_edge=False)
    table.add_column("ID", style="cat.id", justify="right")
    table.add_column("Name", style="cat.name")
    table.add_column("File", style="cat.path")
    table.add_column("Tags")
    table.add_column("Created")
    for item in items:
        table.add_row(*(escape(str(item.get(col, ""))) for col in _CLIP_COLUMNS))
    console.print(table)


def _render_data(console: Console, data: dict[str, Any]) -> None:
    for key, value in data.items():
        if key == "items" and isinstance(value, list):
            continue
        if isinstance(value, (dict, list)):
            value = _json.dumps(value, separators=(",", ":"))
        console.print(f"  [cat.key]{key}:[/] {escape(str(value))}")
    items = data.get("items")
    if isinstance(items, list) and items:
        _render_clips(console, items)


def format_result(result: ServiceResult, *, json_output: bool = False) -> str:
    """Format a ServiceResult for display.

    Args:
        result: The service result to format.
        json_output: If True, return JSON; otherwise return human-readable text.
    """
    if json_output:
        return result.model_dump_json(indent=2)

    console = create_console()
    if result.ok:
        console.print(f"[cat.ok]OK:[/] [cat.op]{result.op}[/]")
        if result.data:
            _render_data(console, result.data)
    else:
        message = result.error.message if result.error else "Unknown error"
        code = result.error.code if result.error else "ERROR"
        console.print(f"[cat.error]ERROR:[/] [cat.op]{result.op}[/] ({code}) - {escape(message)}")
    return get_output(console).rstrip("\n")

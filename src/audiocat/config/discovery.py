"""Locate and read ``audiocat.toml``.

The file is looked up in the start directory and each of its parents, the
way git finds ``.git/``. ``AUDIOCAT_CONFIG`` names a file directly and
disables the lookup; ``--config`` bypasses both.
"""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import click

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "audiocat.toml"
CONFIG_ENV_VAR = "AUDIOCAT_CONFIG"


def _lineage(start: Path) -> Iterator[Path]:
    """*start* followed by each ancestor up to the filesystem root."""
    yield start
    yield from start.parents


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file in effect for *start* (default: cwd), if any."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = Path(env_path)
        if path.is_file():
            return path
        logger.warning("%s points at a missing file: %s", CONFIG_ENV_VAR, env_path)
        return None

    for directory in _lineage((start or Path.cwd()).resolve()):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_config(path: Path | None) -> dict[str, Any]:
    """Parse *path* as TOML; a missing or absent file reads as empty.

    Raises:
        click.ClickException: If the file is not valid TOML.
    """
    if path is None or not path.is_file():
        return {}
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc

"""Unique keys addressing exactly one audio record.

A key is one of three variants, each carrying its typed value. The
repository dispatches on the variant to a bound-parameter predicate.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path


class KeyKind(StrEnum):
    """Unique columns of the ``audio`` table, by short name."""

    ID = "id"
    NAME = "name"
    PATH = "path"


@dataclass(frozen=True, slots=True)
class ById:
    value: int
    kind = KeyKind.ID


@dataclass(frozen=True, slots=True)
class ByName:
    value: str
    kind = KeyKind.NAME


@dataclass(frozen=True, slots=True)
class ByPath:
    value: str
    kind = KeyKind.PATH

    @classmethod
    def of(cls, path: str | Path) -> ByPath:
        """Build a path key from a ``str`` or :class:`~pathlib.Path`."""
        return cls(str(path))


UniqueKey = ById | ByName | ByPath


def parse_key(kind: str, raw: str) -> UniqueKey:
    """Build a key from a column name and its raw string value.

    Examples:
        >>> parse_key("id", "42")
        ById(value=42)
        >>> parse_key("name", "airhorn")
        ByName(value='airhorn')

    Raises:
        ValueError: If *kind* is unknown or an id is not an integer.
    """
    key_kind = KeyKind(kind)
    if key_kind is KeyKind.ID:
        return ById(int(raw))
    if key_kind is KeyKind.NAME:
        return ByName(raw)
    return ByPath.of(raw)

"""Audio record models.

``created_at`` is persisted as a fixed-format UTC string, so datetimes are
normalized to UTC with second precision on the way in. A record read back
from the store compares equal to the one that was inserted.
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

DATETIME_FMT = "%Y-%m-%d %H:%M:%SZ"

NAME_MAX_LEN = 50
TAGS_MAX_LEN = 2048
PATH_MAX_LEN = 500
AUTHOR_MAX_LEN = 256

# SQLite INTEGER is a signed 64-bit value.
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def utc_now() -> datetime:
    """Current UTC time truncated to whole seconds."""
    return datetime.now(UTC).replace(microsecond=0)


def format_timestamp(value: datetime) -> str:
    """Render *value* in the stored ``YYYY-MM-DD HH:MM:SSZ`` form."""
    return value.astimezone(UTC).strftime(DATETIME_FMT)


def parse_timestamp(value: str) -> datetime:
    """Parse a stored timestamp back into an aware UTC datetime."""
    return datetime.strptime(value, DATETIME_FMT).replace(tzinfo=UTC)


class NewAudioRecord(BaseModel):
    """An audio record that has not been stored yet (no ``id``)."""

    model_config = {"frozen": True}

    name: str = Field(min_length=1, max_length=NAME_MAX_LEN)
    tags: str = Field(default="", max_length=TAGS_MAX_LEN)
    audio_file_path: str = Field(min_length=1, max_length=PATH_MAX_LEN)
    created_at: datetime = Field(default_factory=utc_now)
    author_id: int | None = Field(default=None, ge=0, le=INT64_MAX)
    author_name: str | None = Field(default=None, max_length=AUTHOR_MAX_LEN)
    author_global_name: str | None = Field(default=None, max_length=AUTHOR_MAX_LEN)

    @field_validator("audio_file_path", mode="before")
    @classmethod
    def _coerce_path(cls, value: Any) -> Any:
        if isinstance(value, Path):
            return str(value)
        return value

    @field_validator("created_at", mode="after")
    @classmethod
    def _to_utc_seconds(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC).replace(microsecond=0)

    def to_row(self) -> dict[str, Any]:
        """Column values for an INSERT, with ``created_at`` formatted."""
        row = self.model_dump()
        row["created_at"] = format_timestamp(self.created_at)
        return row


class AudioRecord(NewAudioRecord):
    """A stored audio record with its store-assigned ``id``."""

    id: int

    @classmethod
    def from_row(cls, row: Any) -> AudioRecord:
        """Build a record from a SQLAlchemy row mapping."""
        data = dict(row)
        data["created_at"] = parse_timestamp(data["created_at"])
        return cls.model_validate(data)

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly dict with ``created_at`` in stored form."""
        data = self.model_dump()
        data["created_at"] = format_timestamp(self.created_at)
        return data

"""Tests for audio record models."""

from datetime import UTC, datetime, timedelta, timezone
from pathlib import Path

import pytest
from pydantic import ValidationError

from audiocat.domain.records import (
    INT64_MAX,
    AudioRecord,
    NewAudioRecord,
    format_timestamp,
    parse_timestamp,
)


class TestTimestamps:
    def test_format(self) -> None:
        value = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
        assert format_timestamp(value) == "2024-01-02 03:04:05Z"

    def test_format_converts_to_utc(self) -> None:
        value = datetime(2024, 1, 2, 5, 4, 5, tzinfo=timezone(timedelta(hours=2)))
        assert format_timestamp(value) == "2024-01-02 03:04:05Z"

    def test_parse(self) -> None:
        assert parse_timestamp("2024-01-02 03:04:05Z") == datetime(
            2024, 1, 2, 3, 4, 5, tzinfo=UTC
        )


class TestNewAudioRecord:
    def test_defaults(self) -> None:
        record = NewAudioRecord(name="horn", audio_file_path="/a.mp3")
        assert record.tags == ""
        assert record.author_id is None
        assert record.created_at.tzinfo is not None
        assert record.created_at.microsecond == 0

    def test_path_coerced(self) -> None:
        record = NewAudioRecord(name="horn", audio_file_path=Path("/srv/a.mp3"))
        assert record.audio_file_path == "/srv/a.mp3"

    def test_naive_datetime_is_utc(self) -> None:
        record = NewAudioRecord(
            name="horn",
            audio_file_path="/a.mp3",
            created_at=datetime(2024, 1, 1, 0, 0, 0, 999),
        )
        assert record.created_at == datetime(2024, 1, 1, tzinfo=UTC)

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("name", "x" * 51),
            ("name", ""),
            ("tags", "t" * 2049),
            ("audio_file_path", "/" + "p" * 500),
            ("author_name", "a" * 257),
            ("author_id", -1),
            ("author_id", 2**63),
            ("author_id", 2**64 - 1),
        ],
    )
    def test_limits(self, field: str, value: object) -> None:
        fields = {"name": "horn", "audio_file_path": "/a.mp3", field: value}
        with pytest.raises(ValidationError):
            NewAudioRecord(**fields)

    def test_largest_author_id_accepted(self) -> None:
        record = NewAudioRecord(name="horn", audio_file_path="/a.mp3", author_id=INT64_MAX)
        assert record.author_id == 2**63 - 1

    def test_to_row_formats_created_at(self) -> None:
        record = NewAudioRecord(
            name="horn",
            audio_file_path="/a.mp3",
            created_at=datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC),
        )
        assert record.to_row()["created_at"] == "2024-01-02 03:04:05Z"


class TestAudioRecord:
    def test_from_row(self) -> None:
        row = {
            "id": 7,
            "name": "horn",
            "tags": "loud",
            "audio_file_path": "/a.mp3",
            "created_at": "2024-01-02 03:04:05Z",
            "author_id": None,
            "author_name": None,
            "author_global_name": None,
            "score": -1.5,
        }
        record = AudioRecord.from_row(row)
        assert record.id == 7
        assert record.created_at == datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
        assert record.audio_file_path == "/a.mp3"

    def test_to_dict(self) -> None:
        record = AudioRecord(
            id=1,
            name="horn",
            audio_file_path="/a.mp3",
            created_at=datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC),
        )
        assert record.to_dict()["created_at"] == "2024-01-02 03:04:05Z"
        assert record.to_dict()["id"] == 1

"""Tests for the audio record store."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from sqlalchemy.engine import Engine

from audiocat.domain.keys import ById, ByName, ByPath
from audiocat.errors import QueryBuildError, StorageError, UniqueConstraintViolation
from audiocat.infrastructure.database.engine import drop_schema
from audiocat.infrastructure.repositories.audio import AudioRepository, key_predicate
from tests.conftest import BASE_TIME, make_record, seed


class TestInsert:
    def test_largest_author_id_round_trips(self, repo: AudioRepository) -> None:
        stored = repo.insert(make_record("Air Horn", author_id=2**63 - 1))
        assert repo.find(ById(stored.id)) == stored

    def test_unbindable_integer_is_storage_error(self, repo: AudioRepository) -> None:
        # model_copy skips validation, so the value reaches the driver
        record = make_record("Air Horn").model_copy(update={"author_id": 2**64 - 1})
        with pytest.raises(StorageError, match="Insert audio record failed"):
            repo.insert(record)
        assert repo.count() == 0

    def test_assigns_id(self, repo: AudioRepository) -> None:
        first = repo.insert(make_record("Air Horn"))
        second = repo.insert(make_record("Sad Trombone"))
        assert first.id >= 1
        assert second.id > first.id

    def test_round_trips_all_fields(self, repo: AudioRepository) -> None:
        new = make_record(
            "Air Horn",
            tags="loud, meme",
            created_at=datetime(2023, 12, 31, 23, 59, 59, tzinfo=UTC),
            author_id=2**62,
            author_name="dj",
            author_global_name="DJ Khaled",
        )
        stored = repo.insert(new)
        found = repo.find(ById(stored.id))
        assert found == stored
        assert found.model_dump(exclude={"id"}) == new.model_dump()

    def test_duplicate_name(self, repo: AudioRepository) -> None:
        repo.insert(make_record("Air Horn"))
        with pytest.raises(UniqueConstraintViolation) as exc_info:
            repo.insert(make_record("Air Horn", audio_file_path="/srv/audio/other.mp3"))
        assert exc_info.value.column == "name"

    def test_duplicate_path(self, repo: AudioRepository) -> None:
        repo.insert(make_record("Air Horn", audio_file_path="/srv/audio/horn.mp3"))
        with pytest.raises(UniqueConstraintViolation) as exc_info:
            repo.insert(make_record("Fog Horn", audio_file_path="/srv/audio/horn.mp3"))
        assert exc_info.value.column == "audio_file_path"

    def test_duplicate_is_a_storage_error(self, repo: AudioRepository) -> None:
        repo.insert(make_record("Air Horn"))
        with pytest.raises(StorageError):
            repo.insert(make_record("Air Horn"))
        assert repo.count() == 1

    def test_ids_not_reused_after_delete(self, repo: AudioRepository) -> None:
        first = repo.insert(make_record("Air Horn"))
        repo.delete_by_path(first.audio_file_path)
        second = repo.insert(make_record("Air Horn"))
        assert second.id > first.id

    def test_missing_table_is_storage_error(
        self, repo: AudioRepository, db_engine: Engine
    ) -> None:
        drop_schema(db_engine)
        with pytest.raises(StorageError) as exc_info:
            repo.insert(make_record("Air Horn"))
        assert not isinstance(exc_info.value, UniqueConstraintViolation)


class TestFind:
    def test_by_each_key(self, repo: AudioRepository) -> None:
        stored = repo.insert(make_record("Air Horn"))
        assert repo.find(ById(stored.id)) == stored
        assert repo.find(ByName("Air Horn")) == stored
        assert repo.find(ByPath(stored.audio_file_path)) == stored

    def test_absent(self, repo: AudioRepository) -> None:
        assert repo.find(ById(999)) is None
        assert repo.find(ByName("nope")) is None
        assert repo.find(ByPath("/nope.mp3")) is None

    def test_values_are_bound_not_interpolated(self, repo: AudioRepository) -> None:
        repo.insert(make_record("Air Horn"))
        assert repo.find(ByName("x' OR '1'='1")) is None
        assert repo.count() == 1

    def test_quote_in_value(self, repo: AudioRepository) -> None:
        stored = repo.insert(make_record("It's Over", audio_file_path="/srv/it's-over.mp3"))
        assert repo.find(ByName("It's Over")) == stored
        assert repo.find(ByPath("/srv/it's-over.mp3")) == stored

    def test_malformed_key(self, repo: AudioRepository) -> None:
        with pytest.raises(QueryBuildError):
            repo.find(ById("1"))  # type: ignore[arg-type]
        with pytest.raises(QueryBuildError):
            repo.find(ByName(""))

    def test_storage_failure_raises(self, repo: AudioRepository, db_engine: Engine) -> None:
        drop_schema(db_engine)
        with pytest.raises(StorageError, match="Find audio record by name"):
            repo.find(ByName("Air Horn"))


class TestKeyPredicate:
    def test_bool_is_not_an_id(self) -> None:
        with pytest.raises(QueryBuildError):
            key_predicate(ById(True))

    @pytest.mark.parametrize("value", [2**63, -(2**63) - 1, 99999999999999999999])
    def test_id_outside_int64_rejected(self, value: int) -> None:
        with pytest.raises(QueryBuildError, match="64-bit"):
            key_predicate(ById(value))

    def test_int64_bounds_accepted(self) -> None:
        key_predicate(ById(2**63 - 1))
        key_predicate(ById(-(2**63)))

    def test_find_out_of_range_id(self, repo: AudioRepository) -> None:
        with pytest.raises(QueryBuildError):
            repo.find(ById(2**63))

    def test_predicate_binds_value(self) -> None:
        clause = key_predicate(ByName("Air Horn"))
        compiled = clause.compile()
        assert "Air Horn" not in str(compiled)
        assert "Air Horn" in compiled.params.values()


class TestExists:
    def test_lifecycle(self, repo: AudioRepository) -> None:
        path = "/srv/audio/air-horn.mp3"
        assert repo.exists(path) is False
        repo.insert(make_record("Air Horn", audio_file_path=path))
        assert repo.exists(path) is True
        assert repo.exists(Path(path)) is True
        repo.delete_by_path(path)
        assert repo.exists(path) is False

    def test_storage_failure_raises(self, repo: AudioRepository, db_engine: Engine) -> None:
        drop_schema(db_engine)
        with pytest.raises(StorageError):
            repo.exists("/srv/audio/air-horn.mp3")


class TestDeleteByPath:
    def test_deletes(self, repo: AudioRepository) -> None:
        stored = repo.insert(make_record("Air Horn"))
        assert repo.delete_by_path(stored.audio_file_path) is True
        assert repo.find(ById(stored.id)) is None

    def test_absent_is_not_an_error(self, repo: AudioRepository) -> None:
        assert repo.delete_by_path("/srv/audio/nothing.mp3") is False

    def test_only_matching_row(self, repo: AudioRepository) -> None:
        seed(repo, ["Air Horn", "Sad Trombone"])
        repo.delete_by_path("/srv/audio/air-horn.mp3")
        assert [r.name for r in repo.recent(limit=10)] == ["Sad Trombone"]


class TestSearch:
    def test_match_by_name_and_path(self, repo: AudioRepository) -> None:
        stored = repo.insert(
            make_record("Sad Trombone", audio_file_path="/srv/audio/wah_wah.mp3")
        )
        assert repo.search("trombone") == [stored]
        assert repo.search("wah") == [stored]

    def test_match_by_tags(self, repo: AudioRepository) -> None:
        stored = repo.insert(make_record("Air Horn", tags="loud, mlg"))
        assert repo.search("mlg") == [stored]

    def test_query_is_normalized(self, repo: AudioRepository) -> None:
        stored = repo.insert(make_record("Star Wars Theme", tags="it's a trap"))
        assert repo.search("star-wars!!") == [stored]
        assert repo.search("its") == [stored]

    def test_prefix(self, repo: AudioRepository) -> None:
        stored = repo.insert(make_record("Trombone"))
        assert repo.search("trom") == []
        assert repo.search("trom", prefix=True) == [stored]

    def test_gone_after_delete(self, repo: AudioRepository) -> None:
        stored = repo.insert(make_record("Air Horn"))
        repo.delete_by_path(stored.audio_file_path)
        assert repo.search("horn") == []

    def test_limit(self, repo: AudioRepository) -> None:
        seed(repo, [f"Horn {i}" for i in range(8)])
        assert len(repo.search("horn", limit=5)) == 5

    def test_operators_are_not_interpreted(self, repo: AudioRepository) -> None:
        repo.insert(make_record("Air Horn"))
        assert repo.search("horn OR nothing") == []

    def test_empty_query(self, repo: AudioRepository) -> None:
        with pytest.raises(QueryBuildError):
            repo.search("?!")


class TestRecent:
    def test_newest_first(self, repo: AudioRepository) -> None:
        seed(repo, ["One", "Two", "Three"])
        assert [r.name for r in repo.recent(limit=2)] == ["Three", "Two"]

    def test_same_timestamp_uses_id(self, repo: AudioRepository) -> None:
        for name in ("One", "Two"):
            repo.insert(make_record(name, created_at=BASE_TIME))
        assert [r.name for r in repo.recent()] == ["Two", "One"]

    def test_count(self, repo: AudioRepository) -> None:
        assert repo.count() == 0
        seed(repo, ["One", "Two"])
        assert repo.count() == 2

    def test_created_at_preserved(self, repo: AudioRepository) -> None:
        when = BASE_TIME + timedelta(days=3)
        stored = repo.insert(make_record("One", created_at=when))
        assert repo.recent()[0].created_at == when == stored.created_at

"""Record store for the ``audio`` table.

All SQL binds values as parameters; nothing user-supplied is formatted
into statement text. Writes run in ``engine.begin()`` together with the
matching search-index rule, so the row and its index entry change together
or not at all.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import delete, func, insert, select, text

from audiocat.domain.keys import ById, KeyKind, UniqueKey
from audiocat.domain.records import INT64_MAX, INT64_MIN, AudioRecord, NewAudioRecord
from audiocat.domain.text import to_match_query
from audiocat.errors import QueryBuildError
from audiocat.infrastructure.database.guard import storage_guard
from audiocat.infrastructure.database.index import index_delete, index_insert
from audiocat.infrastructure.database.schema import AUDIO_FTS_TABLE, audio

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

_KEY_COLUMNS = {
    KeyKind.ID: audio.c.id,
    KeyKind.NAME: audio.c.name,
    KeyKind.PATH: audio.c.audio_file_path,
}

_SEARCH_SQL = f"""
    SELECT a.*, bm25({AUDIO_FTS_TABLE}) AS score
    FROM {AUDIO_FTS_TABLE}
    JOIN audio AS a ON a.id = {AUDIO_FTS_TABLE}.rowid
    WHERE {AUDIO_FTS_TABLE} MATCH :query
    ORDER BY bm25({AUDIO_FTS_TABLE}), a.id
    LIMIT :limit
"""


def key_predicate(key: UniqueKey) -> ColumnElement[bool]:
    """Bound-parameter WHERE clause selecting the row addressed by *key*.

    Raises:
        QueryBuildError: If the key's value has the wrong type for its column.
    """
    if isinstance(key, ById):
        if isinstance(key.value, bool) or not isinstance(key.value, int):
            msg = f"Audio id must be an integer, got {key.value!r}"
            raise QueryBuildError(msg)
        if not INT64_MIN <= key.value <= INT64_MAX:
            msg = f"Audio id {key.value} is outside the 64-bit integer range"
            raise QueryBuildError(msg)
    elif not isinstance(key.value, str) or not key.value:
        msg = f"Audio {key.kind} must be a non-empty string, got {key.value!r}"
        raise QueryBuildError(msg)
    return _KEY_COLUMNS[key.kind] == key.value


class AudioRepository:
    """Insert, lookup, existence check, search, and delete on ``audio``."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def insert(self, record: NewAudioRecord) -> AudioRecord:
        """Store *record* and its search-index entry atomically.

        Returns the stored record with its assigned ``id``.

        Raises:
            UniqueConstraintViolation: If ``name`` or ``audio_file_path`` is taken.
            StorageError: On any other database failure.
        """
        logger.info(
            "Inserting audio row. Name: %s, File: %s", record.name, record.audio_file_path
        )
        with storage_guard("Insert audio record"), self._engine.begin() as conn:
            result = conn.execute(insert(audio).values(**record.to_row()))
            record_id = int(result.inserted_primary_key[0])
            index_insert(
                conn,
                record_id,
                name=record.name,
                audio_file_path=record.audio_file_path,
                tags=record.tags,
            )
        return AudioRecord(id=record_id, **record.model_dump())

    def find(self, key: UniqueKey) -> AudioRecord | None:
        """Fetch the record addressed by *key*, or None if there is none.

        Raises:
            QueryBuildError: If the key value is malformed.
            StorageError: If the lookup itself failed (logged first).
        """
        stmt = select(audio).where(key_predicate(key))
        with storage_guard(f"Find audio record by {key.kind}"), self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        if row is None:
            logger.debug("No audio record for %s=%r", key.kind, key.value)
            return None
        return AudioRecord.from_row(row)

    def exists(self, path: str | Path) -> bool:
        """Return True iff a record with this ``audio_file_path`` exists.

        Raises:
            StorageError: If the query failed.
        """
        audio_file_path = str(path)
        logger.debug("Checking for existence of audio file: %s", audio_file_path)
        stmt = select(audio.c.id).where(audio.c.audio_file_path == audio_file_path)
        with storage_guard("Check audio file existence"), self._engine.connect() as conn:
            found = conn.execute(stmt).first() is not None
        if found:
            logger.debug("Audio table contains audio file: %s", audio_file_path)
        else:
            logger.debug("Audio table does not contain audio file: %s", audio_file_path)
        return found

    def delete_by_path(self, path: str | Path) -> bool:
        """Delete the record with this path and its index entry.

        A missing record is not an error. Returns True if a row was deleted.
        """
        audio_file_path = str(path)
        with storage_guard("Delete audio record"), self._engine.begin() as conn:
            record_id = conn.execute(
                select(audio.c.id).where(audio.c.audio_file_path == audio_file_path)
            ).scalar_one_or_none()
            if record_id is None:
                logger.debug("Nothing to delete for audio file: %s", audio_file_path)
                return False
            conn.execute(delete(audio).where(audio.c.id == record_id))
            index_delete(conn, record_id)
        logger.info("Deleted audio record %d (%s)", record_id, audio_file_path)
        return True

    def search(self, query: str, *, limit: int = 5, prefix: bool = False) -> list[AudioRecord]:
        """Full-text match over normalized name, path, and tags (BM25 order).

        Raises:
            QueryBuildError: If *query* has nothing searchable after normalization.
            StorageError: If the query failed.
        """
        match = to_match_query(query, prefix=prefix)
        logger.debug("FTS search %r -> %s", query, match)
        with storage_guard("Search audio records"), self._engine.connect() as conn:
            rows = conn.execute(text(_SEARCH_SQL), {"query": match, "limit": limit}).mappings()
            return [AudioRecord.from_row(row) for row in rows]

    def recent(self, *, limit: int = 5) -> list[AudioRecord]:
        """Most recently created records, newest first."""
        stmt = select(audio).order_by(audio.c.created_at.desc(), audio.c.id.desc()).limit(limit)
        with storage_guard("List recent audio records"), self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [AudioRecord.from_row(row) for row in rows]

    def count(self) -> int:
        """Number of stored records."""
        with storage_guard("Count audio records"), self._engine.connect() as conn:
            return int(conn.execute(select(func.count(audio.c.id))).scalar_one())

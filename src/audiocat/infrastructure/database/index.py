"""Search-index consistency rules for the ``audio_fts`` table.

Every primary-table write calls exactly one of :func:`index_insert`,
:func:`index_delete`, or :func:`index_update` on the same ``Connection``
inside the same transaction, so a reader never sees a primary-row change
without its index effect. Callers own the transaction (``engine.begin()``).

Nothing in the package updates rows yet; :func:`index_update` is the rule an
update path must call. Rows changed by raw SQL bypass all three rules and
leave their entries stale: :func:`check_index` reports them and
:func:`rebuild_index` must be run to repair them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sqlalchemy import select, text

from audiocat.domain.text import normalize
from audiocat.infrastructure.database.guard import storage_guard
from audiocat.infrastructure.database.schema import AUDIO_FTS_TABLE, audio

if TYPE_CHECKING:
    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

_INSERT_SQL = text(
    f"INSERT INTO {AUDIO_FTS_TABLE}(rowid, name, audio_file_path, tags) "
    "VALUES (:id, :name, :audio_file_path, :tags)"
)
_DELETE_SQL = text(f"DELETE FROM {AUDIO_FTS_TABLE} WHERE rowid = :id")


def index_entry(name: str, audio_file_path: str, tags: str) -> dict[str, str]:
    """Normalized column values stored in the index for one record."""
    return {
        "name": normalize(name),
        "audio_file_path": normalize(audio_file_path),
        "tags": normalize(tags),
    }


def index_insert(
    conn: Connection, record_id: int, *, name: str, audio_file_path: str, tags: str
) -> None:
    """Add the index entry for a freshly inserted record."""
    conn.execute(_INSERT_SQL, {"id": record_id, **index_entry(name, audio_file_path, tags)})


def index_delete(conn: Connection, record_id: int) -> None:
    """Remove the index entry of a deleted record. No-op if absent."""
    conn.execute(_DELETE_SQL, {"id": record_id})


def index_update(
    conn: Connection, record_id: int, *, name: str, audio_file_path: str, tags: str
) -> None:
    """Replace a stale index entry with one reflecting the new values.

    FTS5 tables don't support UPDATE, so this is DELETE + INSERT.
    """
    index_delete(conn, record_id)
    index_insert(conn, record_id, name=name, audio_file_path=audio_file_path, tags=tags)


def rebuild_index(engine: Engine) -> int:
    """Re-derive every index entry from the primary table.

    Runs in one transaction. Returns the number of entries written.
    """
    with storage_guard("Rebuild search index"), engine.begin() as conn:
        conn.execute(text(f"DELETE FROM {AUDIO_FTS_TABLE}"))
        rows = conn.execute(
            select(audio.c.id, audio.c.name, audio.c.audio_file_path, audio.c.tags)
        ).fetchall()
        for row in rows:
            index_insert(
                conn,
                row.id,
                name=row.name,
                audio_file_path=row.audio_file_path,
                tags=row.tags,
            )
    logger.info("Rebuilt search index with %d entries", len(rows))
    return len(rows)


@dataclass
class IndexReport:
    """Differences between the primary table and the search index."""

    record_count: int = 0
    entry_count: int = 0
    missing: list[int] = field(default_factory=list)  # records without an entry
    orphaned: list[int] = field(default_factory=list)  # entries without a record
    stale: list[int] = field(default_factory=list)  # entries with outdated text

    @property
    def consistent(self) -> bool:
        return not (self.missing or self.orphaned or self.stale)


def check_index(engine: Engine) -> IndexReport:
    """Compare the search index against the primary table."""
    with storage_guard("Check search index"), engine.connect() as conn:
        records = {
            row.id: index_entry(row.name, row.audio_file_path, row.tags)
            for row in conn.execute(
                select(audio.c.id, audio.c.name, audio.c.audio_file_path, audio.c.tags)
            )
        }
        entries = {
            row.rowid: {
                "name": row.name,
                "audio_file_path": row.audio_file_path,
                "tags": row.tags,
            }
            for row in conn.execute(
                text(f"SELECT rowid, name, audio_file_path, tags FROM {AUDIO_FTS_TABLE}")
            )
        }

    report = IndexReport(record_count=len(records), entry_count=len(entries))
    report.missing = sorted(records.keys() - entries.keys())
    report.orphaned = sorted(entries.keys() - records.keys())
    report.stale = sorted(
        record_id
        for record_id in records.keys() & entries.keys()
        if records[record_id] != entries[record_id]
    )
    if not report.consistent:
        logger.warning(
            "Search index out of sync: %d missing, %d orphaned, %d stale",
            len(report.missing),
            len(report.orphaned),
            len(report.stale),
        )
    return report

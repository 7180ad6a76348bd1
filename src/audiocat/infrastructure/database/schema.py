"""SQLAlchemy Core table definitions for the audio catalog.

The FTS5 virtual table is created via raw DDL in :func:`create_schema`
since SQLAlchemy cannot express SQLite virtual tables natively.
"""

from __future__ import annotations

from sqlalchemy import Column, Index, Integer, MetaData, String, Table

from audiocat.domain.records import AUTHOR_MAX_LEN, NAME_MAX_LEN, PATH_MAX_LEN, TAGS_MAX_LEN

metadata = MetaData()

AUDIO_TABLE = "audio"
AUDIO_FTS_TABLE = "audio_fts"

audio = Table(
    AUDIO_TABLE,
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(NAME_MAX_LEN), nullable=False, unique=True),
    Column("tags", String(TAGS_MAX_LEN), nullable=False, default="", server_default=""),
    Column("audio_file_path", String(PATH_MAX_LEN), nullable=False, unique=True),
    Column("created_at", String(25), nullable=False),  # %Y-%m-%d %H:%M:%SZ
    Column("author_id", Integer),
    Column("author_name", String(AUTHOR_MAX_LEN)),
    Column("author_global_name", String(AUTHOR_MAX_LEN)),
    # AUTOINCREMENT keeps ids of deleted rows from being handed out again.
    sqlite_autoincrement=True,
)

Index("ix_audio_created_at", audio.c.created_at)

# FTS5 index DDL, standalone (no content= clause), keyed by rowid == audio.id.
# Holds normalized name/path/tags; the index module owns every write to it.
FTS5_CREATE_SQL = (
    f"CREATE VIRTUAL TABLE IF NOT EXISTS {AUDIO_FTS_TABLE} "
    "USING fts5(name, audio_file_path, tags)"
)

FTS5_DROP_SQL = f"DROP TABLE IF EXISTS {AUDIO_FTS_TABLE}"

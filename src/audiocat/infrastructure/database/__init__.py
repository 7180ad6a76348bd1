"""SQLite engine, schema, and search-index maintenance via SQLAlchemy Core."""

from audiocat.infrastructure.database.engine import (
    create_db_engine,
    create_schema,
    drop_schema,
    init_database,
)
from audiocat.infrastructure.database.index import (
    IndexReport,
    check_index,
    index_delete,
    index_insert,
    index_update,
    rebuild_index,
)
from audiocat.infrastructure.database.schema import audio, metadata

__all__ = [
    "IndexReport",
    "audio",
    "check_index",
    "create_db_engine",
    "create_schema",
    "drop_schema",
    "index_delete",
    "index_insert",
    "index_update",
    "init_database",
    "metadata",
    "rebuild_index",
]

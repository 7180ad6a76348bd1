"""Database engine setup and schema management for SQLite.

SQLite is the persistence layer: WAL mode for concurrent reads, FTS5 for
full-text search, ACID transactions for keeping the index in step with the
primary table. The engine's ``QueuePool`` is the bounded connection pool;
every operation checks a connection out with ``engine.connect()`` or
``engine.begin()`` and returns it when the block exits.

SQLAlchemy Core (not ORM) is used because the catalog has one table and
no object graph to track.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import QueuePool, StaticPool

from audiocat.errors import StorageError
from audiocat.infrastructure.database.guard import storage_guard
from audiocat.infrastructure.database.schema import (
    AUDIO_FTS_TABLE,
    AUDIO_TABLE,
    FTS5_CREATE_SQL,
    FTS5_DROP_SQL,
    metadata,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from audiocat.config.models import DatabaseConfig

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"

# Trigger names installed by databases created before the index was
# maintained by the application. They would double every index write.
_LEGACY_TRIGGERS = (
    f"{AUDIO_TABLE}_insert",
    f"{AUDIO_TABLE}_delete",
    f"{AUDIO_TABLE}_update",
)


def create_db_engine(
    db_path: Path | str,
    *,
    pool_size: int = 5,
    max_overflow: int = 10,
    pool_timeout: float = 30.0,
    busy_timeout_ms: int = 5000,
) -> Engine:
    """Create a pooled SQLite engine with WAL mode and transactional DDL.

    ``":memory:"`` yields a single shared connection (``StaticPool``),
    otherwise a ``QueuePool`` bounded by *pool_size* + *max_overflow*.
    """
    if str(db_path) == MEMORY_PATH:
        engine = create_engine(
            "sqlite://",
            echo=False,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_engine(
            f"sqlite:///{db_path}",
            echo=False,
            poolclass=QueuePool,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_timeout=pool_timeout,
            connect_args={"check_same_thread": False},
        )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        # Let SQLAlchemy emit BEGIN itself so DDL is transactional too.
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute(f"PRAGMA busy_timeout={int(busy_timeout_ms)}")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _do_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")

    return engine


def create_schema(engine: Engine) -> None:
    """Create the ``audio`` table and its search index in one transaction.

    Idempotent; safe to call on an existing database.

    Raises:
        StorageError: If any part of the schema could not be created. The
            transaction is rolled back, so no partial schema is left behind.
    """
    logger.info("Creating tables %s, %s", AUDIO_TABLE, AUDIO_FTS_TABLE)
    with storage_guard("Create schema"), engine.begin() as conn:
        metadata.create_all(conn)
        conn.execute(text(FTS5_CREATE_SQL))
        for trigger in _LEGACY_TRIGGERS:
            conn.execute(text(f"DROP TRIGGER IF EXISTS {trigger}"))
    logger.info("Created tables %s, %s", AUDIO_TABLE, AUDIO_FTS_TABLE)


def drop_schema(engine: Engine) -> bool:
    """Drop the search index and the ``audio`` table.

    Failures are logged, not raised. Returns True when both were dropped.
    """
    try:
        with engine.begin() as conn:
            conn.execute(text(FTS5_DROP_SQL))
            metadata.drop_all(conn)
    except SQLAlchemyError as exc:
        logger.error("Error dropping tables %s, %s: %s", AUDIO_TABLE, AUDIO_FTS_TABLE, exc)
        return False
    logger.info("Dropped tables %s, %s", AUDIO_TABLE, AUDIO_FTS_TABLE)
    return True


def init_database(db_path: Path | str, config: DatabaseConfig | None = None) -> Engine:
    """Open the catalog database at *db_path* and ensure its schema exists.

    Creates parent directories as needed. Pool parameters come from
    *config* (``[database]`` section) when given.

    Returns the engine ready for use.

    Raises:
        StorageError: If the schema cannot be created. The engine is
            disposed before raising; callers should not continue.
    """
    if str(db_path) != MEMORY_PATH:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    pool_kwargs: dict[str, Any] = {}
    if config is not None:
        pool_kwargs = {
            "pool_size": config.pool_size,
            "max_overflow": config.max_overflow,
            "pool_timeout": config.pool_timeout,
            "busy_timeout_ms": config.busy_timeout_ms,
        }
    engine = create_db_engine(db_path, **pool_kwargs)

    try:
        create_schema(engine)
    except StorageError:
        engine.dispose()
        raise
    return engine

"""Translation of SQLAlchemy exceptions into catalog errors."""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from audiocat.errors import StorageError, UniqueConstraintViolation

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

# sqlite3 reports e.g. "UNIQUE constraint failed: audio.name"
_UNIQUE_FAILED = re.compile(r"UNIQUE constraint failed: \w+\.(\w+)")


def unique_column(exc: IntegrityError) -> str | None:
    """Return the column named by a UNIQUE violation, if any."""
    match = _UNIQUE_FAILED.search(str(exc.orig))
    return match.group(1) if match else None


@contextmanager
def storage_guard(action: str) -> Iterator[None]:
    """Re-raise SQLAlchemy failures inside the block as catalog errors.

    Args:
        action: Short description used in log lines and error messages.

    Raises:
        UniqueConstraintViolation: On a UNIQUE constraint failure.
        StorageError: On any other database failure, including an integer
            parameter too large for SQLite.
    """
    try:
        yield
    except IntegrityError as exc:
        column = unique_column(exc)
        if column is not None:
            logger.info("%s rejected: duplicate %s", action, column)
            msg = f"{action} failed: an audio record with this {column} already exists"
            raise UniqueConstraintViolation(msg, column=column) from exc
        logger.error("%s failed: %s", action, exc.orig)
        raise StorageError(f"{action} failed: {exc.orig}") from exc
    except (SQLAlchemyError, OverflowError) as exc:
        # sqlite3 raises OverflowError unwrapped when binding an int outside int64
        logger.error("%s failed: %s", action, exc)
        raise StorageError(f"{action} failed: {exc}") from exc

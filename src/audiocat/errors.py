"""Exception hierarchy for the catalog core.

Infrastructure raises these; the service layer converts them into
:class:`~audiocat.services.result.ServiceError` codes.
"""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for all catalog failures."""

    code = "CATALOG_ERROR"


class StorageError(CatalogError):
    """Connection, schema, or query execution failure."""

    code = "STORAGE_ERROR"


class UniqueConstraintViolation(StorageError):
    """Insert collided with an existing ``name`` or ``audio_file_path``."""

    code = "DUPLICATE"

    def __init__(self, message: str, *, column: str | None = None) -> None:
        super().__init__(message)
        self.column = column


class NotFound(CatalogError):
    """A unique-key lookup matched no row."""

    code = "NOT_FOUND"


class QueryBuildError(CatalogError):
    """Search text or predicate could not be turned into a valid query."""

    code = "INVALID_QUERY"

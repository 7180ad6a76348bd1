"""CatalogService — the surface the bot's command layer calls into.

- add_clip: existence check, then atomic insert of row + index entry
- get_clip: unique-key lookup (id, name, or path)
- delete_clip: delete by path; a missing clip is not an error
- search / autocomplete: normalized FTS5 match, recent clips for short input
- export: full catalog walk via AudioPaginator
- check / reindex: search-index consistency report and rebuild

Lookups report storage faults as NOT_FOUND: a clip the bot cannot read is,
from the user's side, a clip that is not there. The fault is logged and
``detail["cause"]`` tells the two apart for callers that care.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from audiocat.domain.keys import UniqueKey
from audiocat.domain.records import NewAudioRecord
from audiocat.errors import NotFound, QueryBuildError, StorageError, UniqueConstraintViolation
from audiocat.infrastructure.database.engine import drop_schema
from audiocat.infrastructure.database.index import check_index, rebuild_index
from audiocat.infrastructure.repositories.audio import AudioRepository
from audiocat.infrastructure.repositories.pagination import AudioPaginator, OrderBy
from audiocat.services.base import BaseService
from audiocat.services.result import ServiceResult

logger = logging.getLogger(__name__)


def _not_found(key: UniqueKey) -> NotFound:
    return NotFound(f"Audio track not found - {key.value}")


class CatalogService(BaseService):
    """Catalog operations for clip upload, lookup, search, and export."""

    @property
    def repository(self) -> AudioRepository:
        return AudioRepository(self._engine)

    # ------------------------------------------------------------------
    # add / get / delete
    # ------------------------------------------------------------------

    def add_clip(
        self,
        name: str,
        audio_file_path: str | Path,
        *,
        tags: str = "",
        created_at: datetime | None = None,
        author_id: int | None = None,
        author_name: str | None = None,
        author_global_name: str | None = None,
    ) -> ServiceResult:
        """Store a new clip after checking its file is not already cataloged."""
        op = "add_clip"
        fields: dict[str, Any] = {
            "name": name,
            "audio_file_path": audio_file_path,
            "tags": tags,
            "author_id": author_id,
            "author_name": author_name,
            "author_global_name": author_global_name,
        }
        if created_at is not None:
            fields["created_at"] = created_at
        try:
            record = NewAudioRecord(**fields)
        except ValidationError as exc:
            errors = [
                {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                for err in exc.errors()
            ]
            return self._fail(op, "INVALID_INPUT", "Invalid clip fields", {"errors": errors})

        repo = self.repository
        try:
            if repo.exists(record.audio_file_path):
                return self._fail(
                    op,
                    UniqueConstraintViolation.code,
                    f"Audio file already cataloged: {record.audio_file_path}",
                    {"column": "audio_file_path"},
                )
            stored = repo.insert(record)
        except UniqueConstraintViolation as exc:
            return self._from_error(op, exc, column=exc.column)
        except StorageError as exc:
            return self._from_error(op, exc)

        return self._ok(op, stored.to_dict())

    def get_clip(self, key: UniqueKey) -> ServiceResult:
        """Fetch one clip by id, name, or path."""
        op = "get_clip"
        try:
            record = self.repository.find(key)
        except QueryBuildError as exc:
            return self._from_error(op, exc)
        except StorageError as exc:
            logger.error(
                "Lookup of %s=%r failed, reporting not found: %s", key.kind, key.value, exc
            )
            return self._from_error(op, _not_found(key), cause="storage_error")
        if record is None:
            return self._from_error(op, _not_found(key), cause="absent")
        return self._ok(op, record.to_dict())

    def delete_clip(self, audio_file_path: str | Path) -> ServiceResult:
        """Delete the clip stored at *audio_file_path*, if any."""
        op = "delete_clip"
        try:
            deleted = self.repository.delete_by_path(audio_file_path)
        except StorageError as exc:
            return self._from_error(op, exc)
        return self._ok(op, {"audio_file_path": str(audio_file_path), "deleted": deleted})

    # ------------------------------------------------------------------
    # search / autocomplete
    # ------------------------------------------------------------------

    def search(self, query: str, *, limit: int | None = None) -> ServiceResult:
        """Normalized full-text match over clip names, paths, and tags."""
        op = "search"
        if limit is None:
            limit = self._settings.search.autocomplete_limit
        if limit < 1:
            return self._fail(op, "INVALID_INPUT", f"limit must be positive, got {limit}")
        try:
            records = self.repository.search(
                query, limit=limit, prefix=self._settings.search.prefix_match
            )
        except (QueryBuildError, StorageError) as exc:
            return self._from_error(op, exc)
        items = [record.to_dict() for record in records]
        return self._ok(op, {"query": query, "count": len(items), "items": items})

    def autocomplete(self, partial: str) -> ServiceResult:
        """Suggest clip names for partially typed input.

        Input shorter than ``search.short_query_length`` lists the newest
        clips; longer input runs a prefix FTS match. Failures degrade to an
        empty suggestion list.
        """
        op = "autocomplete"
        search_config = self._settings.search
        limit = search_config.autocomplete_limit
        warnings: list[str] = []
        records = []
        try:
            if len(partial.strip()) < search_config.short_query_length:
                logger.debug("Low character autocomplete: %r", partial)
                records = self.repository.recent(limit=limit)
            else:
                logger.debug("Autocomplete partial search on %r", partial)
                records = self.repository.search(
                    partial, limit=limit, prefix=search_config.prefix_match
                )
        except QueryBuildError:
            logger.debug("Autocomplete input %r has nothing searchable", partial)
        except StorageError as exc:
            logger.error("Autocomplete query error - %s", exc)
            warnings.append("Autocomplete query failed")
        names = [record.name for record in records]
        return self._ok(op, {"partial": partial, "names": names}, warnings)

    # ------------------------------------------------------------------
    # export
    # ------------------------------------------------------------------

    def paginator(
        self,
        *,
        order_by: OrderBy | str | None = None,
        page_size: int | None = None,
        keyset: bool | None = None,
    ) -> AudioPaginator:
        """Paginator over the catalog, defaulting to the ``[pagination]`` settings."""
        config = self._settings.pagination
        return (
            AudioPaginator.builder(self._engine)
            .order_by(config.order_by if order_by is None else order_by)
            .page_size(config.page_size if page_size is None else page_size)
            .keyset(config.keyset if keyset is None else keyset)
            .build()
        )

    def export(
        self,
        *,
        order_by: OrderBy | str | None = None,
        page_size: int | None = None,
        keyset: bool | None = None,
    ) -> ServiceResult:
        """Walk the whole catalog page by page."""
        op = "export"
        try:
            paginator = self.paginator(order_by=order_by, page_size=page_size, keyset=keyset)
        except ValueError as exc:
            return self._fail(op, "INVALID_INPUT", str(exc))

        items: list[dict[str, Any]] = []
        pages = 0
        for page in paginator:
            pages += 1
            items.extend(record.to_dict() for record in page)
        return self._ok(
            op,
            {
                "order_by": str(paginator.order_by),
                "page_size": paginator.page_size,
                "pages": pages,
                "count": len(items),
                "items": items,
            },
        )

    # ------------------------------------------------------------------
    # index maintenance
    # ------------------------------------------------------------------

    def check(self) -> ServiceResult:
        """Report differences between the catalog and its search index."""
        op = "check"
        try:
            report = check_index(self._engine)
        except StorageError as exc:
            return self._from_error(op, exc)

        warnings: list[str] = []
        if report.missing:
            warnings.append(f"{len(report.missing)} clip(s) missing from the search index")
        if report.orphaned:
            warnings.append(f"{len(report.orphaned)} orphaned search index entries")
        if report.stale:
            warnings.append(f"{len(report.stale)} stale search index entries")
        return self._ok(
            op,
            {
                "consistent": report.consistent,
                "records": report.record_count,
                "entries": report.entry_count,
                "missing": report.missing,
                "orphaned": report.orphaned,
                "stale": report.stale,
            },
            warnings,
        )

    def reindex(self) -> ServiceResult:
        """Rebuild the search index from the catalog table."""
        op = "reindex"
        try:
            count = rebuild_index(self._engine)
        except StorageError as exc:
            return self._from_error(op, exc)
        return self._ok(op, {"entries": count})

    def drop(self) -> ServiceResult:
        """Drop the catalog table and its search index."""
        op = "drop"
        if not drop_schema(self._engine):
            return self._fail(op, StorageError.code, "Failed to drop catalog tables")
        return self._ok(op, {"dropped": True})

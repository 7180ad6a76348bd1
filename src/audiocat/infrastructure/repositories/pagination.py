"""Page-at-a-time traversal of the ``audio`` table.

Usage::

    paginator = AudioPaginator.builder(engine).order_by(OrderBy.NAME).page_size(100).build()
    for page in paginator:
        ...

Offset mode (the default) advances by ``page_size`` after every fetch, so
rows inserted or deleted between fetches can be skipped or repeated. Keyset
mode resumes after the last row seen instead and is immune to that.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from sqlalchemy import select, tuple_

from audiocat.domain.records import AudioRecord
from audiocat.errors import StorageError
from audiocat.infrastructure.database.guard import storage_guard
from audiocat.infrastructure.database.schema import audio

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Select
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 500


class OrderBy(StrEnum):
    """Columns the catalog can be paged by."""

    CREATED_AT = "created_at"
    ID = "id"
    NAME = "name"


class AudioPaginator:
    """Forward-only, non-restartable cursor over the catalog.

    Each page checks out its own pooled connection, so a page reflects the
    table as of that page's query.
    """

    def __init__(
        self,
        engine: Engine,
        *,
        order_by: OrderBy = OrderBy.ID,
        page_size: int = DEFAULT_PAGE_SIZE,
        keyset: bool = False,
    ) -> None:
        if page_size < 1:
            msg = f"page_size must be positive, got {page_size}"
            raise ValueError(msg)
        self._engine = engine
        self.order_by = OrderBy(order_by)
        self.page_size = page_size
        self.keyset = keyset
        self.offset = 0
        self._last: tuple[Any, int] | None = None
        self._exhausted = False

    @classmethod
    def builder(cls, engine: Engine) -> AudioPaginatorBuilder:
        return AudioPaginatorBuilder(engine)

    def _statement(self) -> Select[Any]:
        column = audio.c[self.order_by.value]
        stmt = select(audio).limit(self.page_size)
        if self.order_by is OrderBy.ID:
            stmt = stmt.order_by(audio.c.id)
        else:
            # created_at is not unique; id keeps the order total
            stmt = stmt.order_by(column, audio.c.id)

        if not self.keyset:
            return stmt.offset(self.offset)
        if self._last is not None:
            last_value, last_id = self._last
            if self.order_by is OrderBy.ID:
                stmt = stmt.where(audio.c.id > last_id)
            else:
                stmt = stmt.where(tuple_(column, audio.c.id) > tuple_(last_value, last_id))
        return stmt

    def next_page(self) -> list[AudioRecord]:
        """Fetch the next page of up to ``page_size`` records.

        In offset mode the offset advances by ``page_size`` regardless of
        how many rows came back.

        Raises:
            StorageError: If the page query failed.
        """
        stmt = self._statement()
        with storage_guard("Fetch audio page"), self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()

        page: list[AudioRecord] = []
        for row in rows:
            try:
                page.append(AudioRecord.from_row(row))
            except ValueError as exc:  # pydantic ValidationError or a bad timestamp
                logger.error("Skipping unreadable audio row id=%s - %s", row["id"], exc)
        self.offset += self.page_size
        if rows:
            last = rows[-1]
            self._last = (last[self.order_by.value], last["id"])
        return page

    def __iter__(self) -> Iterator[list[AudioRecord]]:
        """Yield non-empty pages until an empty or failed page.

        A failed page is logged and ends the iteration like end-of-data.
        """
        while not self._exhausted:
            try:
                page = self.next_page()
            except StorageError as exc:
                logger.error("AudioPaginator error at offset %d - %s", self.offset, exc)
                self._exhausted = True
                return
            if not page:
                self._exhausted = True
                return
            yield page


class AudioPaginatorBuilder:
    """Fluent configuration for :class:`AudioPaginator`."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._order_by = OrderBy.ID
        self._page_size = DEFAULT_PAGE_SIZE
        self._keyset = False

    def order_by(self, value: OrderBy | str) -> AudioPaginatorBuilder:
        self._order_by = OrderBy(value)
        return self

    def page_size(self, value: int) -> AudioPaginatorBuilder:
        self._page_size = value
        return self

    def keyset(self, enabled: bool = True) -> AudioPaginatorBuilder:
        self._keyset = enabled
        return self

    def build(self) -> AudioPaginator:
        return AudioPaginator(
            self._engine,
            order_by=self._order_by,
            page_size=self._page_size,
            keyset=self._keyset,
        )

"""Repositories encapsulating SQL for the audio catalog."""

from audiocat.infrastructure.repositories.audio import AudioRepository
from audiocat.infrastructure.repositories.pagination import (
    AudioPaginator,
    AudioPaginatorBuilder,
    OrderBy,
)

__all__ = ["AudioPaginator", "AudioPaginatorBuilder", "AudioRepository", "OrderBy"]

"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, audiocat.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    path: str = "audiocat.db"  # relative paths resolve against the config directory
    pool_size: int = Field(default=5, ge=1)
    max_overflow: int = Field(default=10, ge=0)
    pool_timeout: float = Field(default=30.0, gt=0)
    busy_timeout_ms: int = Field(default=5000, ge=0)


class SearchConfig(BaseModel):
    """[search] section."""

    model_config = {"frozen": True}

    autocomplete_limit: int = Field(default=5, ge=1)
    short_query_length: int = Field(default=3, ge=0)
    prefix_match: bool = True


class PaginationConfig(BaseModel):
    """[pagination] section."""

    model_config = {"frozen": True}

    page_size: int = Field(default=500, ge=1)
    order_by: str = "id"
    keyset: bool = False

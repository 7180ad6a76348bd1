"""Return types of the catalog service layer.

Service methods never raise for expected failures (duplicates, missing
clips, malformed queries, storage faults); they hand back a ServiceResult
and let the caller decide how to present it.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Why an operation failed: a stable ``code`` plus a human message."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one catalog operation.

    Attributes:
        ok: True when the operation did what was asked.
        op: Operation name, e.g. ``"add_clip"`` or ``"autocomplete"``.
        data: JSON-friendly payload; empty on failure.
        warnings: Degradations the caller may want to surface.
        error: Set exactly when ``ok`` is False.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None

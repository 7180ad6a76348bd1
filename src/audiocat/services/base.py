"""BaseService — shared foundation for catalog services.

Every service receives the pooled ``Engine`` and the settings at
construction time. There is no process-wide engine; whoever builds the
service owns the engine's lifetime.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from audiocat.errors import CatalogError
from audiocat.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from audiocat.config.settings import AudiocatSettings


class BaseService:
    """Base for service-layer classes."""

    def __init__(self, engine: Engine, settings: AudiocatSettings) -> None:
        self._engine = engine
        self._settings = settings

    @staticmethod
    def _ok(op: str, data: dict[str, Any], warnings: list[str] | None = None) -> ServiceResult:
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings or [])

    @staticmethod
    def _fail(
        op: str, code: str, message: str, detail: dict[str, Any] | None = None
    ) -> ServiceResult:
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=detail or {}),
        )

    @classmethod
    def _from_error(cls, op: str, exc: CatalogError, **detail: Any) -> ServiceResult:
        """Failure result using the exception's own error code."""
        return cls._fail(op, exc.code, str(exc), detail)

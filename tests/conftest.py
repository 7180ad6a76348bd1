"""Shared pytest fixtures and test helpers for audiocat tests."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from audiocat.config.settings import AudiocatSettings
from audiocat.domain.records import AudioRecord, NewAudioRecord
from audiocat.infrastructure.database.engine import init_database
from audiocat.infrastructure.repositories.audio import AudioRepository
from audiocat.services.catalog import CatalogService

BASE_TIME = datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer config and env overrides out of the tests."""
    monkeypatch.delenv("AUDIOCAT_CONFIG", raising=False)
    monkeypatch.delenv("AUDIOCAT_DB_PATH", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Iterator[Engine]:
    """Initialized SQLite engine with the catalog schema created."""
    engine = init_database(tmp_path / "audiocat.db")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def repo(db_engine: Engine) -> AudioRepository:
    return AudioRepository(db_engine)


@pytest.fixture
def settings(tmp_path: Path) -> AudiocatSettings:
    return AudiocatSettings.from_cli(root=tmp_path)


@pytest.fixture
def catalog(db_engine: Engine, settings: AudiocatSettings) -> CatalogService:
    return CatalogService(db_engine, settings)


@pytest.fixture
def _isolated_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated database.

    Use via ``@pytest.mark.usefixtures("_isolated_root")`` on command test classes.
    """
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def make_record(name: str, **overrides: Any) -> NewAudioRecord:
    """Build a NewAudioRecord with a path derived from *name*."""
    fields: dict[str, Any] = {
        "name": name,
        "audio_file_path": f"/srv/audio/{name.lower().replace(' ', '-')}.mp3",
        "tags": "",
        "created_at": BASE_TIME,
    }
    fields.update(overrides)
    return NewAudioRecord(**fields)


def seed(repo: AudioRepository, names: list[str]) -> list[AudioRecord]:
    """Insert one record per name, each a minute newer than the last."""
    return [
        repo.insert(make_record(name, created_at=BASE_TIME + timedelta(minutes=i)))
        for i, name in enumerate(names)
    ]

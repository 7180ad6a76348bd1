"""AudiocatSettings: one frozen object built from every configuration source.

When a value is set in more than one place, the first of these wins:

1. keyword arguments (the CLI passes its flags here)
2. ``AUDIOCAT_*`` environment variables, ``__`` separating section and key
   (``AUDIOCAT_SEARCH__AUTOCOMPLETE_LIMIT=8``)
3. ``audiocat.toml``
4. defaults in :mod:`audiocat.config.models`
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from audiocat.config.discovery import find_config, read_config
from audiocat.config.models import DatabaseConfig, PaginationConfig, SearchConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Supply values from an ``audiocat.toml`` file (lowest-priority source)."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data = read_config(toml_path)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# TOML path handed to settings_customise_sources during construction.
_tls = threading.local()


class AudiocatSettings(BaseSettings):
    """Settings for the audiocat CLI and for services embedding the catalog.

    Attributes:
        root: Directory relative database paths resolve against (parent of
            ``audiocat.toml``, or CWD if no config found).
        config_path: The TOML file in effect, if any.
        db_path: Explicit ``--db`` override of ``[database] path``.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "AUDIOCAT_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None
    db_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    pagination: PaginationConfig = Field(default_factory=PaginationConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Keyword arguments, then environment, then ``audiocat.toml``."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @property
    def database_path(self) -> Path | str:
        """Resolved database location (``":memory:"`` is passed through)."""
        if self.db_path is not None:
            return self.db_path
        if self.database.path == ":memory:":
            return self.database.path
        path = Path(self.database.path).expanduser()
        return path if path.is_absolute() else self.root / path

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        **cli_flags: Any,
    ) -> AudiocatSettings:
        """Construct settings from a CLI invocation.

        Discovers ``audiocat.toml`` via walk-up (or explicit *config_path*),
        resolves *root* from the config file's parent directory, and merges
        CLI flags as highest-priority overrides. ``None`` flags are dropped
        so they don't mask env or TOML values.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(root)

        resolved_root = root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        flags = {key: value for key, value in cli_flags.items() if value is not None}
        _tls.toml_path = toml_path
        try:
            return cls(root=resolved_root, config_path=toml_path, **flags)
        finally:
            _tls.toml_path = None

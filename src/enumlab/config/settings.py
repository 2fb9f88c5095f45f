"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``ENUMLAB_*`` prefix, ``__`` for nested sections
  3. TOML file    — ``enumlab.toml`` discovered via walk-up
  4. Code defaults — baked into the section models
"""

from __future__ import annotations

import os
import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from enumlab.config.models import AccountConfig, OutputConfig

CONFIG_FILENAME = "enumlab.toml"
CONFIG_ENV_VAR = "ENUMLAB_CONFIG"


class ConfigError(Exception):
    """The configuration file exists but cannot be used."""


def find_config(start: Path | None = None) -> Path | None:
    """Locate ``enumlab.toml`` in *start* (default: cwd) or any parent.

    An ``ENUMLAB_CONFIG`` path wins over the walk-up; if it names a
    missing file, no config is used at all.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a discovered ``enumlab.toml``."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            try:
                self._data = tomllib.loads(toml_path.read_text(encoding="utf-8"))
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise ConfigError(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class EnumlabSettings(BaseSettings):
    """Unified, frozen settings for the enumlab CLI and services.

    Attributes:
        config_path: The ``enumlab.toml`` actually loaded, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "ENUMLAB_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    account: AccountConfig = Field(default_factory=AccountConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        search_from: Path | None = None,
        **cli_flags: Any,
    ) -> EnumlabSettings:
        """Build settings for one CLI invocation.

        An explicit *config_path* that does not exist is ignored, like a
        missing discovered file. Otherwise ``enumlab.toml`` is searched
        from *search_from* (default: cwd) upwards.
        """
        toml_path: Path | None
        if config_path:
            explicit = Path(config_path)
            toml_path = explicit if explicit.is_file() else None
        else:
            toml_path = find_config(search_from)

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **cli_flags)
        except ValidationError as exc:
            where = toml_path or "environment"
            msg = f"Invalid settings ({where}): {exc.error_count()} error(s)\n{exc}"
            raise ConfigError(msg) from exc
        finally:
            _tls.toml_path = None

"""Tests for EnumlabSettings — CLI flags, env vars and enumlab.toml."""

from __future__ import annotations

from pathlib import Path

import pytest

from enumlab.config.models import AccountConfig, OutputConfig
from enumlab.config.settings import (
    CONFIG_FILENAME,
    ConfigError,
    EnumlabSettings,
    find_config,
)


class TestDefaults:
    def test_all_defaults(self, workdir: Path) -> None:
        settings = EnumlabSettings.from_cli(search_from=workdir)
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.verbose is False
        assert settings.account == AccountConfig()
        assert settings.account.opening_funds == 0
        assert settings.account.currency == "credits"
        assert settings.output.width == 100

    def test_frozen(self, settings: EnumlabSettings) -> None:
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]

    def test_section_models_validate(self) -> None:
        with pytest.raises(Exception):
            AccountConfig(opening_funds=-1)
        with pytest.raises(Exception):
            OutputConfig(width=10)


class TestDiscovery:
    def test_walks_up(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config(nested) == (tmp_path / CONFIG_FILENAME).resolve()

    def test_none_found(self, workdir: Path) -> None:
        assert find_config(workdir) is None

    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "custom.toml"
        custom.write_text("")
        monkeypatch.setenv("ENUMLAB_CONFIG", str(custom))
        assert find_config(tmp_path / "elsewhere") == custom

    def test_env_override_missing_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        monkeypatch.setenv("ENUMLAB_CONFIG", str(tmp_path / "missing.toml"))
        assert find_config(tmp_path) is None


class TestTomlSource:
    def test_loads_sections(self, workdir: Path) -> None:
        (workdir / CONFIG_FILENAME).write_text(
            '[account]\nopening_funds = 250\ncurrency = "gold"\n[output]\nwidth = 60\n'
        )
        settings = EnumlabSettings.from_cli(search_from=workdir)
        assert settings.account.opening_funds == 250
        assert settings.account.currency == "gold"
        assert settings.output.width == 60
        assert settings.config_path == (workdir / CONFIG_FILENAME).resolve()

    def test_sparse_override(self, workdir: Path) -> None:
        (workdir / CONFIG_FILENAME).write_text("[account]\nopening_funds = 5\n")
        settings = EnumlabSettings.from_cli(search_from=workdir)
        assert settings.account.opening_funds == 5
        assert settings.account.currency == "credits"

    def test_explicit_config_path(self, workdir: Path) -> None:
        custom = workdir / "conf" / "mine.toml"
        custom.parent.mkdir()
        custom.write_text('[account]\ncurrency = "EUR"\n')
        settings = EnumlabSettings.from_cli(config_path=str(custom), search_from=workdir)
        assert settings.account.currency == "EUR"
        assert settings.config_path == custom

    def test_explicit_missing_path_ignored(self, workdir: Path) -> None:
        settings = EnumlabSettings.from_cli(config_path=str(workdir / "nope.toml"))
        assert settings.config_path is None

    def test_invalid_toml(self, workdir: Path) -> None:
        (workdir / CONFIG_FILENAME).write_text("[account\n")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            EnumlabSettings.from_cli(search_from=workdir)

    def test_out_of_range_value(self, workdir: Path) -> None:
        (workdir / CONFIG_FILENAME).write_text("[account]\nopening_funds = -10\n")
        with pytest.raises(ConfigError, match="Invalid settings"):
            EnumlabSettings.from_cli(search_from=workdir)


class TestPriority:
    def test_env_beats_toml(self, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (workdir / CONFIG_FILENAME).write_text('[account]\ncurrency = "gold"\n')
        monkeypatch.setenv("ENUMLAB_ACCOUNT__CURRENCY", "silver")
        settings = EnumlabSettings.from_cli(search_from=workdir)
        assert settings.account.currency == "silver"

    def test_cli_flags_beat_env(self, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENUMLAB_QUIET", "false")
        settings = EnumlabSettings.from_cli(search_from=workdir, quiet=True)
        assert settings.quiet is True

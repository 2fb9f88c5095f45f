"""Shared pytest fixtures for enumlab tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from enumlab.config.settings import EnumlabSettings
from enumlab.services.telemetry import _current_span, disable_telemetry


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ``ENUMLAB_*`` variables from the developer's shell out of every test."""
    for name in list(os.environ):
        if name.startswith("ENUMLAB_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _restore_global_state() -> Generator[None]:
    """Undo logging and telemetry changes made by AppContext during CLI tests."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    app_level = logging.getLogger("enumlab").level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("enumlab").setLevel(app_level)
    disable_telemetry()
    _current_span.set(None)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Empty working directory so config discovery finds nothing unless a test writes it."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def settings(workdir: Path) -> EnumlabSettings:
    """Default settings with no ``enumlab.toml`` in reach."""
    return EnumlabSettings.from_cli(search_from=workdir)

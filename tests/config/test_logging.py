"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging

import pytest
import structlog

from enumlab.config.logging import LOGGER_NAME, configure_logging


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger(LOGGER_NAME).level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_quiet_by_default(self) -> None:
        configure_logging()
        assert logging.getLogger(LOGGER_NAME).level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        structlog.get_logger("enumlab.test").warning("json test", answer=42)
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "enumlab.test"
        assert "timestamp" in parsed

    def test_stdlib_records_are_structured(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("enumlab.services.account").debug("Step %d: %s", 1, "ok")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Step 1: ok"
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "enumlab.services.account"

    def test_debug_hidden_without_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        logging.getLogger("enumlab.domain").debug("noise")
        logging.getLogger("someone.else").info("more noise")
        assert capfd.readouterr().err == ""

    def test_idempotent_calls(self) -> None:
        configure_logging(verbose=True)
        configure_logging(verbose=True)
        assert len(logging.getLogger().handlers) == 1

    def test_json_renders_exceptions(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        try:
            raise ValueError("bad state")
        except ValueError:
            logging.getLogger("enumlab.domain").exception("replay failed")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "replay failed"
        assert "ValueError: bad state" in parsed["exception"]

"""Tests for structlog logging setup."""

from __future__ import annotations

import json
import logging

import pytest
import structlog

from case_synth.core.config import ObservabilityConfig
from case_synth.hooks.logging_config import add_service_name, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


class TestSetupLogging:
    def test_installs_processor_formatter(self, restore_root_logger: logging.Logger) -> None:
        setup_logging(ObservabilityConfig(log_level="DEBUG"))
        root = restore_root_logger
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)

    def test_litellm_stays_quiet(self, restore_root_logger: logging.Logger) -> None:
        setup_logging(ObservabilityConfig(log_level="DEBUG"))
        assert logging.getLogger("LiteLLM").level == logging.WARNING

    def test_unknown_level_defaults_to_info(self, restore_root_logger: logging.Logger) -> None:
        setup_logging(ObservabilityConfig(log_level="chatty"))
        assert restore_root_logger.level == logging.INFO

    def test_events_carry_service_name(
        self, restore_root_logger: logging.Logger, capsys: pytest.CaptureFixture[str]
    ) -> None:
        setup_logging(ObservabilityConfig(service_name="claims-seeder"))
        logging.getLogger("case_synth.tests").warning("seeded")
        line = capsys.readouterr().err.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["service"] == "claims-seeder"
        assert event["event"] == "seeded"


class TestAddServiceName:
    def test_keeps_explicit_service(self) -> None:
        processor = add_service_name("case-synth")
        assert processor(None, "info", {"event": "x"})["service"] == "case-synth"
        assert processor(None, "info", {"event": "x", "service": "other"})["service"] == "other"

"""Tests for settings, logging setup and metrics collection."""

import logging

import pytest
from pydantic import ValidationError

from agent_orchestrator.agent import AgentConfig
from agent_orchestrator.config import Settings, get_settings
from agent_orchestrator.logging import PACKAGE_LOGGER, setup_logging
from agent_orchestrator.metrics import InMemoryMetrics


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("LLM_MODEL", "MAX_RETRIES", "RATE_LIMIT_PER_MINUTE", "MAX_ITERATIONS", "AGENT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.llm_model == "claude-sonnet-4-20250514"
        assert settings.max_retries == 3
        assert settings.rate_limit_per_minute == 50
        assert settings.max_iterations == 10

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("LLM_MODEL", "claude-other")
        monkeypatch.setenv("MAX_RETRIES", "5")
        monkeypatch.setenv("RATE_LIMIT_PER_MINUTE", "7")
        monkeypatch.setenv("MAX_ITERATIONS", "2")

        settings = Settings(_env_file=None)

        assert settings.llm_model == "claude-other"
        assert settings.max_retries == 5
        assert settings.rate_limit_per_minute == 7
        assert settings.max_iterations == 2

    def test_zero_rate_limit_rejected(self, monkeypatch):
        monkeypatch.setenv("RATE_LIMIT_PER_MINUTE", "0")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_agent_config_from_settings(self):
        settings = Settings(_env_file=None, max_iterations=4, request_timeout=30)
        config = AgentConfig.from_settings(settings)
        assert config.max_iterations == 4
        assert config.request_timeout == 30
        assert config.generation_params.model == settings.llm_model


class TestLogging:
    """Tests for setup_logging."""

    def test_level_from_argument(self):
        logger = setup_logging("DEBUG")
        assert logger.name == PACKAGE_LOGGER
        assert logger.level == logging.DEBUG

    def test_invalid_level_falls_back(self, capsys):
        logger = setup_logging("LOUD")
        assert logger.level == logging.WARNING
        assert "Invalid log level" in capsys.readouterr().err

    def test_repeated_setup_keeps_one_console_handler(self):
        setup_logging("INFO")
        count = len(logging.getLogger(PACKAGE_LOGGER).handlers)
        setup_logging("ERROR")
        assert len(logging.getLogger(PACKAGE_LOGGER).handlers) == count


class TestInMemoryMetrics:
    """Tests for the metrics collector."""

    def test_counters_and_gauges(self):
        metrics = InMemoryMetrics()
        metrics.increment("api_calls")
        metrics.increment("api_calls", 2)
        metrics.gauge("api_latency_ms", 12.5)
        metrics.gauge("api_latency_ms", 8.0)

        assert metrics.snapshot() == {
            "counters": {"api_calls": 3},
            "gauges": {"api_latency_ms": 8.0},
        }
        assert metrics.counter("missing") == 0

    def test_reset(self):
        metrics = InMemoryMetrics()
        metrics.increment("x")
        metrics.reset()
        assert metrics.snapshot() == {"counters": {}, "gauges": {}}

    def test_snapshot_is_a_copy(self):
        metrics = InMemoryMetrics()
        snapshot = metrics.snapshot()
        metrics.increment("x")
        assert snapshot["counters"] == {}

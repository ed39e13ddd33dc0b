"""Tests for service config — env-driven settings."""

from __future__ import annotations

from pathlib import Path

from resumeledger.config import DEFAULT_DATABASE_PATH, ServiceConfig


class TestServiceConfig:
    def test_defaults(self):
        config = ServiceConfig()
        assert config.environment == "development"
        assert config.log_level == "INFO"
        assert config.default_template == "json"

    def test_transaction_budget_defaults(self):
        config = ServiceConfig()
        assert config.tx_wait_seconds == 10.0
        assert config.tx_timeout_seconds == 50.0
        assert config.tx_max_retries == 3

    def test_analytics_write_budget_default(self):
        assert ServiceConfig().analytics_wait_seconds == 0.25

    def test_default_database_path(self):
        assert ServiceConfig().database_path == DEFAULT_DATABASE_PATH

    def test_is_production_false_by_default(self):
        assert ServiceConfig().is_production is False

    def test_is_production_when_set(self):
        assert ServiceConfig(environment="production").is_production is True

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("RESUMELEDGER_DATABASE_PATH", "/data/resumes.db")
        monkeypatch.setenv("RESUMELEDGER_TX_WAIT_SECONDS", "2.5")
        monkeypatch.setenv("RESUMELEDGER_ANALYTICS_ENABLED", "false")
        config = ServiceConfig()
        assert config.database_path == Path("/data/resumes.db")
        assert config.tx_wait_seconds == 2.5
        assert config.analytics_enabled is False

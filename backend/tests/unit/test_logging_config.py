"""Tests for centralized logging configuration."""

import logging
from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from logging_config import QUIET_LOGGERS, setup_logging
from services.performance_service import SnapshotPoint, period_performance


def _use_level(monkeypatch, level: str) -> None:
    monkeypatch.setenv("LOG_LEVEL", level)
    from config import Settings
    monkeypatch.setattr("logging_config.settings", Settings())


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_root_logger_level_default_info(self, monkeypatch):
        """Default LOG_LEVEL should set root logger to INFO."""
        _use_level(monkeypatch, "INFO")

        setup_logging()

        assert logging.getLogger().level == logging.INFO

    def test_root_logger_level_from_settings(self, monkeypatch):
        """LOG_LEVEL setting should control root logger level."""
        _use_level(monkeypatch, "DEBUG")

        setup_logging()

        assert logging.getLogger().level == logging.DEBUG

    def test_quiet_loggers_held_at_warning(self, monkeypatch):
        """Database, migration and access loggers stay at WARNING even under DEBUG."""
        _use_level(monkeypatch, "DEBUG")

        setup_logging()

        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING, (
                f"{name} logger not quieted"
            )

    @pytest.mark.parametrize("name", [
        "services.snapshot_valuation_service",
        "services.performance_service",
        "services.preference_service",
        "api.dashboard",
    ])
    def test_app_loggers_follow_log_level(self, monkeypatch, name):
        """Application loggers are not quieted and inherit the root level."""
        _use_level(monkeypatch, "DEBUG")

        setup_logging()

        assert logging.getLogger(name).getEffectiveLevel() == logging.DEBUG

    def test_warning_level_keeps_fallback_warnings(self, monkeypatch):
        """At WARNING, service info is hidden but fallback warnings still pass."""
        _use_level(monkeypatch, "WARNING")

        setup_logging()

        service_logger = logging.getLogger("services.performance_service")
        assert not service_logger.isEnabledFor(logging.INFO)
        assert service_logger.isEnabledFor(logging.WARNING)

    def test_period_fallback_logged_under_service_name(self, caplog):
        """Skipped periods are reported on the performance service logger."""
        points = [
            SnapshotPoint(snapshot_id="a", date=date(2025, 1, 31), total_value=Decimal("1000")),
            SnapshotPoint(snapshot_id="b", date=date(2025, 2, 28), total_value=Decimal("1100")),
        ]

        with caplog.at_level(logging.WARNING, logger="services.performance_service"):
            period_performance(points, ["BOGUS"])

        assert any(
            r.name == "services.performance_service" and r.levelno == logging.WARNING
            for r in caplog.records
        )

    def test_invalid_log_level_rejected(self, monkeypatch):
        """Invalid LOG_LEVEL values should raise a validation error."""
        monkeypatch.setenv("LOG_LEVEL", "VERBOS")
        from config import Settings
        with pytest.raises(ValidationError, match="LOG_LEVEL"):
            Settings()

    def test_log_level_case_insensitive(self, monkeypatch):
        """LOG_LEVEL should accept lowercase values."""
        monkeypatch.setenv("LOG_LEVEL", "debug")
        from config import Settings
        test_settings = Settings()
        assert test_settings.LOG_LEVEL == "DEBUG"

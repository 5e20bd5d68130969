"""
Tests for logging configuration.
"""
import logging

import pytest


class TestLoggingConfiguration:
    """Test logging setup and configuration."""

    def test_setup_logging_default_level(self, monkeypatch):
        """Test that setup_logging defaults to INFO level."""
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        from fleet_dashboard.logging_config import setup_logging
        setup_logging()

        logger = logging.getLogger("fleet_dashboard")
        assert logger.level == logging.INFO

    def test_setup_logging_respects_env_var(self, monkeypatch):
        """Test that LOG_LEVEL env var is respected."""
        monkeypatch.setenv("LOG_LEVEL", "WARNING")

        from fleet_dashboard.logging_config import setup_logging
        setup_logging()

        assert logging.getLogger("fleet_dashboard").level == logging.WARNING

    def test_setup_logging_invalid_level_defaults_to_info(self):
        """Test that invalid level falls back to INFO."""
        from fleet_dashboard.logging_config import setup_logging
        setup_logging(level="INVALID_LEVEL")

        assert logging.getLogger("fleet_dashboard").level == logging.INFO

    def test_noisy_loggers_quiet_outside_debug(self):
        from fleet_dashboard.logging_config import NOISY_LOGGERS, setup_logging
        setup_logging(level="INFO")

        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_noisy_loggers_follow_debug(self):
        from fleet_dashboard.logging_config import setup_logging
        setup_logging(level="DEBUG")

        assert logging.getLogger("sqlalchemy.engine").level == logging.DEBUG
        setup_logging(level="INFO")

    @pytest.mark.parametrize("raw, expected", [
        ("debug", "DEBUG"),
        (" warning ", "WARNING"),
        ("verbose", "INFO"),
    ])
    def test_resolve_log_level(self, raw, expected):
        from fleet_dashboard.logging_config import resolve_log_level
        assert resolve_log_level(raw) == expected

    def test_resolve_log_level_reads_env(self, monkeypatch):
        from fleet_dashboard.logging_config import resolve_log_level
        monkeypatch.setenv("LOG_LEVEL", "error")
        assert resolve_log_level() == "ERROR"


class TestServiceLogging:
    """Test what the services log at INFO."""

    def test_task_creation_logged(self, db_session, caplog):
        from fleet_dashboard.services import tasks as task_service

        with caplog.at_level(logging.INFO, logger="fleet_dashboard"):
            task = task_service.create_task(db_session, title="t", description="Inspect the haul road")

        messages = [r.getMessage() for r in caplog.records]
        assert any(task.id in m and "Created task" in m for m in messages)

    def test_conflict_logged_as_warning(self, session_factory, caplog):
        from fleet_dashboard.models import Task
        from fleet_dashboard.services import tasks as task_service
        from fleet_dashboard.errors import ConflictError

        setup = session_factory()
        task_id = task_service.create_task(setup, title="t", description="Inspect the haul road").id
        setup.close()

        stale = session_factory()
        # Held so the identity map keeps the version-1 row
        stale_task = stale.get(Task, task_id)
        assert stale_task.version == 1
        fresh = session_factory()
        task_service.cancel_task(fresh, task_id)
        fresh.close()

        with caplog.at_level(logging.WARNING, logger="fleet_dashboard"):
            with pytest.raises(ConflictError):
                task_service.cancel_task(stale, task_id)
        stale.close()

        warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
        assert any("Concurrent update" in m for m in warnings)

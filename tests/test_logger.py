"""
Tests for logging functionality.
"""
import logging
from pathlib import Path
from src.utils.logger import REDACTED, setup_logging, get_logger, LoggerMixin, log_error, redact_secrets


def test_setup_logging():
    """Test logging setup."""
    setup_logging()

    assert Path("logs").exists()

    logger = get_logger("test")
    assert logger is not None


def test_setup_logging_is_idempotent():
    """File handlers are attached only once."""
    setup_logging()
    setup_logging()

    marked = [h for h in logging.getLogger().handlers if getattr(h, "_support_desk", False)]
    assert len(marked) == 2


def test_redact_secrets():
    """Tokens, passwords and API keys never reach the renderer."""
    event = redact_secrets(
        None,
        "info",
        {
            "event": "Signed in",
            "user_id": "u-1",
            "access_token": "eyJhbGciOi",
            "payload": {"openai_api_key": "sk-live", "provider": "openai"},
            "refresh_token": None,
        },
    )

    assert event["user_id"] == "u-1"
    assert event["access_token"] == REDACTED
    assert event["payload"] == {"openai_api_key": REDACTED, "provider": "openai"}
    assert event["refresh_token"] is None


def test_logger_mixin():
    """Test LoggerMixin functionality."""

    class InboxWorker(LoggerMixin):
        def work(self):
            self.logger.info("Working", query_id="q-1")
            return "success"

    worker = InboxWorker()

    assert worker.work() == "success"
    assert hasattr(worker, 'logger')


def test_log_error():
    """Test error logging function."""
    setup_logging()

    try:
        raise ValueError("Test error")
    except ValueError as e:
        log_error(e, {"url": "http://testserver/dashboard/inbox", "method": "GET"})

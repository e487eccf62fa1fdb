"""
Structured logging for the Support Desk dashboard.

Every event passes through ``redact_secrets`` before rendering: the dashboard
handles passwords, session tokens and provider API keys, none of which may
reach stdout or the log files.
"""
import logging
import sys
from pathlib import Path
from typing import Any, Dict, MutableMapping, Optional
import structlog
from structlog.stdlib import LoggerFactory
from src.config.settings import settings

SENSITIVE_KEYS = frozenset({
    "password",
    "access_token",
    "refresh_token",
    "authorization",
    "apikey",
    "api_key",
    "openai_api_key",
    "token",
})
REDACTED = "[redacted]"

# marks the file handlers we own on the root logger
_HANDLER_FLAG = "_support_desk"


def redact_secrets(logger: Any, method_name: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """structlog processor masking values of sensitive keys, one level deep into dicts."""
    for key, value in list(event_dict.items()):
        if key.lower() in SENSITIVE_KEYS and value:
            event_dict[key] = REDACTED
        elif isinstance(value, dict):
            event_dict[key] = {
                k: REDACTED if str(k).lower() in SENSITIVE_KEYS and v else v
                for k, v in value.items()
            }
    return event_dict


def _file_handler(path: Path, level: int) -> logging.Handler:
    handler = logging.FileHandler(path)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    setattr(handler, _HANDLER_FLAG, True)
    return handler


def setup_logging() -> None:
    """Configure structlog on top of stdlib logging, with app and error log files."""
    renderer = (
        structlog.dev.ConsoleRenderer(colors=True)
        if settings.debug
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            redact_secrets,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    root_logger = logging.getLogger()
    # the app lifespan calls this on every start; tests start several apps
    if any(getattr(h, _HANDLER_FLAG, False) for h in root_logger.handlers):
        return

    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    root_logger.addHandler(_file_handler(log_dir / "app.log", logging.INFO))
    root_logger.addHandler(_file_handler(log_dir / "error.log", logging.ERROR))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


class LoggerMixin:
    """Gives services a ``logger`` named after their class."""

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        return get_logger(self.__class__.__name__)


def log_error(error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
    """Log an unhandled error with the request it happened in."""
    get_logger("error").error(
        "Unhandled error",
        error_type=type(error).__name__,
        error_message=str(error),
        context=context or {},
        exc_info=error,
    )

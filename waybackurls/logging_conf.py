"""Logging configuration built around structlog JSON logging."""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path

import structlog

from .config import DEFAULT_LOG_PATH

_CONFIGURED_PATH: Path | None = None


def configure_logging(log_path: Path | str | None = None, verbose: bool = False) -> structlog.BoundLogger:
    """Configure structlog + stdlib handlers and return the application logger.

    ``log_path`` defaults to ``logs/waybackurls.log``. Failing to create the
    file raises ``OSError``; that is the only fatal error of a harvest run.
    """

    global _CONFIGURED_PATH
    path = Path(log_path) if log_path else DEFAULT_LOG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.touch(exist_ok=True)

    if _CONFIGURED_PATH != path:
        console_level = "DEBUG" if verbose else "WARNING"
        logging.config.dictConfig(
            {
                "version": 1,
                "disable_existing_loggers": False,
                "formatters": {
                    "json": {
                        "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                        "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
                    }
                },
                "handlers": {
                    # stdout is reserved for harvested URLs
                    "console": {
                        "class": "logging.StreamHandler",
                        "stream": "ext://sys.stderr",
                        "level": console_level,
                        "formatter": "json",
                    },
                    "file": {
                        "class": "logging.FileHandler",
                        "level": "DEBUG" if verbose else "INFO",
                        "filename": str(path),
                        "encoding": "utf-8",
                        "formatter": "json",
                    },
                },
                "loggers": {
                    "waybackurls": {
                        "handlers": ["console", "file"],
                        "level": "DEBUG" if verbose else "INFO",
                        "propagate": False,
                    },
                },
            }
        )

        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.stdlib.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
        )
        _CONFIGURED_PATH = path
    return structlog.get_logger("waybackurls")


def tail_log(path: Path, line_count: int = 100) -> list[str]:
    """Return the last N lines from a log file."""

    if not path.exists():
        return []
    with path.open("r", encoding="utf-8", errors="ignore") as stream:
        lines = stream.readlines()
    return lines[-line_count:]


__all__ = ["configure_logging", "tail_log"]

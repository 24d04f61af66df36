"""Logging configuration built around structlog JSON logging."""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path

import structlog

_LOGGING_INITIALISED = False


def configure_logging(verbose: bool = False, log_file: Path | None = None) -> structlog.BoundLogger:
    """Configure structlog + stdlib handlers and return the application logger.

    The console handler writes to stderr only, so JSON sent to stdout is
    never interleaved with log lines.
    """

    global _LOGGING_INITIALISED
    if not _LOGGING_INITIALISED:
        console_level = "DEBUG" if verbose else "WARNING"
        handlers: dict[str, dict] = {
            "console": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
                "level": console_level,
                "formatter": "json",
            },
        }
        if log_file is not None:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            handlers["file"] = {
                "class": "logging.FileHandler",
                "level": "DEBUG" if verbose else "INFO",
                "filename": str(log_file),
                "encoding": "utf-8",
                "formatter": "json",
            }
        logging.config.dictConfig(
            {
                "version": 1,
                "disable_existing_loggers": False,
                "formatters": {
                    "json": {
                        "()": "pythonjsonlogger.json.JsonFormatter",
                        "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
                    }
                },
                "handlers": handlers,
                "loggers": {
                    "duoload": {
                        "handlers": list(handlers),
                        "level": "DEBUG" if verbose else "INFO",
                        "propagate": False,
                    },
                    "httpx": {
                        "handlers": list(handlers),
                        "level": "DEBUG" if verbose else "WARNING",
                        "propagate": False,
                    },
                },
            }
        )

        # Forward structlog events to stdlib; extra keys become JSON fields
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.stdlib.filter_by_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.stdlib.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.stdlib.render_to_log_kwargs,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        _LOGGING_INITIALISED = True
    return structlog.get_logger("duoload")


__all__ = ["configure_logging"]

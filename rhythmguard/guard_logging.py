"""Logging setup for rhythmguard.

Every module logs through ``get_logger()``. ``setup_logging`` is called once
by the CLI; library callers can leave it alone and attach their own handlers
to the ``rhythmguard`` logger.
"""

import json
import logging
import logging.config
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

LOGGER_NAME = "rhythmguard"

# Record attributes copied into JSON entries when a call passes them as extra=
LINT_EXTRA_FIELDS = ("rule_id", "file_path", "finding_count", "duration_ms")

CONSOLE_FORMAT = "%(levelname)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d - %(message)s"


class JSONFormatter(logging.Formatter):
    """Render log records as one JSON object per line, with lint extras."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
            "message": record.getMessage(),
        }
        entry.update(
            {name: getattr(record, name) for name in LINT_EXTRA_FIELDS if hasattr(record, name)}
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _console_level(level: str, quiet: bool, verbose: bool) -> str:
    if quiet:
        return "ERROR"
    if verbose:
        return "DEBUG"
    return level.upper()


def setup_logging(
    level: str = "WARNING",
    quiet: bool = False,
    verbose: bool = False,
    log_file: Path | None = None,
    log_format: str = "text",
    rotation_count: int = 3,
    max_bytes: int = 10 * 1024 * 1024,
) -> logging.Logger:
    """Configure the package logger.

    Console output always goes to stderr so reports on stdout stay parseable.
    ``quiet`` wins over ``verbose``.

    Args:
        level: Console level when neither quiet nor verbose is set.
        quiet: Only show errors on the console.
        verbose: Show debug output on the console.
        log_file: Optional rotating log file, which always records DEBUG.
        log_format: "text" or "json" for both handlers.
        rotation_count: Number of rotated files to keep.
        max_bytes: Size at which the log file rotates.

    Returns:
        The configured ``rhythmguard`` logger.
    """
    use_json = log_format == "json"
    handlers: dict[str, dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json" if use_json else "console",
            "level": _console_level(level, quiet, verbose),
            "stream": "ext://sys.stderr",
        }
    }
    if log_file:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "json" if use_json else "file",
            "level": "DEBUG",
            "filename": str(log_file),
            "maxBytes": max_bytes,
            "backupCount": rotation_count,
            "encoding": "utf-8",
        }

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": {"format": CONSOLE_FORMAT},
                "file": {"format": FILE_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"},
                "json": {"()": JSONFormatter},
            },
            "handlers": handlers,
            "loggers": {
                LOGGER_NAME: {
                    "handlers": list(handlers),
                    "level": "DEBUG",
                    "propagate": False,
                }
            },
        }
    )
    return logging.getLogger(LOGGER_NAME)


def get_logger() -> logging.Logger:
    """Return the shared package logger."""
    return logging.getLogger(LOGGER_NAME)

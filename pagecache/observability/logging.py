"""
Pagecache — Structured Logging

JSON log formatting for the ``pagecache`` logger hierarchy. Hosts that
already configure logging can ignore this module; everything else calls
configure_logging() once at startup.
"""

import json
import logging
from datetime import UTC, datetime

from ..config.schemas import LogLevel

LOGGER_NAME = "pagecache"

_RESERVED_ATTRS = frozenset(
    (
        "args",
        "msg",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "name",
        "message",
        "taskName",
    )
)


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Extra fields passed via ``extra=``
        for key, value in record.__dict__.items():
            if key not in log_data and not key.startswith("_") and key not in _RESERVED_ATTRS:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    json_format: bool = True,
) -> logging.Logger:
    """
    Install a stream handler on the ``pagecache`` logger.

    Existing handlers on that logger are replaced, so calling this twice
    does not duplicate output.

    Args:
        level: Minimum level to emit
        json_format: Use JSONFormatter, else a plain text format

    Returns:
        The configured logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()

    handler = logging.StreamHandler()
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)

    level_name = level.value if isinstance(level, LogLevel) else str(level).upper()
    logger.setLevel(level_name)
    return logger

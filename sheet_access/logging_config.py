"""
Centralized logging configuration for sheet_access.
JSON lines in production, colored console output in development.
"""
import logging
import sys
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import os

# Attributes callers pass through ``extra=`` that the formatters render.
CONTEXT_FIELDS = (
    "request_id",
    "method",
    "endpoint",
    "status_code",
    "duration_ms",
    "spreadsheet_id",
    "sheet_name",
    "position",
)


class JSONFormatter(logging.Formatter):
    """
    Structured formatter: one JSON object per record, for log aggregation.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        # Free-form payloads go under "extra"
        if hasattr(record, "extra"):
            log_data["extra"] = record.extra

        return json.dumps(log_data, default=str)


class ColoredFormatter(logging.Formatter):
    """
    Colored console formatter for development environments.
    """

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        log_color = self.COLORS.get(record.levelname, self.RESET)

        formatted = f"{log_color}[{record.levelname}]{self.RESET} "
        formatted += f"{record.name} - {record.getMessage()}"

        extras = []
        if hasattr(record, "request_id"):
            extras.append(f"request_id={record.request_id}")
        if hasattr(record, "sheet_name"):
            extras.append(f"sheet={record.sheet_name}")
        if hasattr(record, "position"):
            extras.append(f"position={record.position}")
        if hasattr(record, "duration_ms"):
            extras.append(f"duration={record.duration_ms}ms")
        if hasattr(record, "status_code"):
            extras.append(f"status={record.status_code}")

        if extras:
            formatted += f" ({', '.join(extras)})"

        if record.exc_info:
            formatted += "\n" + self.formatException(record.exc_info)

        return formatted


def setup_logging(
    log_level: Optional[str] = None,
    use_json: Optional[bool] = None,
    logger_name: Optional[str] = None
) -> logging.Logger:
    """
    Configure and return a logger instance.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
                   Defaults to LOG_LEVEL env var or INFO.
        use_json: Whether to use JSON formatting. Defaults to True when
                  ENVIRONMENT is production or LOG_FORMAT is json.
        logger_name: Name of the logger to configure. If None, configures root logger.

    Returns:
        Configured logger instance.
    """
    if log_level is None:
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    if use_json is None:
        environment = os.getenv("ENVIRONMENT", "production").lower()
        log_format = os.getenv("LOG_FORMAT", "").lower()
        use_json = environment == "production" or log_format == "json"

    logger = logging.getLogger(logger_name)
    logger.setLevel(getattr(logging, log_level))

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, log_level))
    console_handler.setFormatter(JSONFormatter() if use_json else ColoredFormatter())
    logger.addHandler(console_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module (typically ``__name__``).

    Module loggers carry no handlers of their own and propagate to the root
    logger configured by ``setup_logging``.
    """
    return logging.getLogger(name)


# Configure root logger on import
setup_logging()

"""Structured logging configuration for lackeys."""

import logging
import json
import sys
from datetime import datetime, timezone
from typing import Any, Optional

# Logger that every lackeys module logs under
ROOT_LOGGER_NAME = "lackeys"


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        # Lift extra fields that start with "extra_"
        for key, value in record.__dict__.items():
            if key.startswith("extra_"):
                log_data[key.replace("extra_", "", 1)] = value

        return json.dumps(log_data, default=str)


def setup_logging(
    service_name: str = ROOT_LOGGER_NAME,
    level: Optional[str] = None,
    fmt: Optional[str] = None,
) -> logging.Logger:
    """Configure logging for the lackeys logger hierarchy.

    Only the "lackeys" logger is touched; the root logger is left alone so
    host applications keep control of their own handlers.

    Args:
        service_name: Name reported in structured records
        level: Log level (defaults to LACKEYS_LOG_LEVEL)
        fmt: "json" or "text" (defaults to LACKEYS_LOG_FORMAT)

    Returns:
        The configured "lackeys" logger
    """
    from lackeys.lib.config_manager import config

    level = level or config.get("LACKEYS_LOG_LEVEL")
    fmt = fmt or config.get("LACKEYS_LOG_FORMAT")

    handler = logging.StreamHandler(sys.stdout)
    if fmt == "json":
        handler.setFormatter(StructuredFormatter(service_name))
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(getattr(logging, str(level).upper()))
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.propagate = False

    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    **extra_fields: Any,
) -> None:
    """Log a message with additional structured fields.

    Args:
        logger: Logger instance
        level: Log level (debug, info, warning, error, critical)
        message: Log message
        **extra_fields: Fields included in the structured record
    """
    extra = {f"extra_{k}": v for k, v in extra_fields.items()}
    log_method = getattr(logger, level.lower())
    log_method(message, extra=extra)

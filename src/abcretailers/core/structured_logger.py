"""
Structured logging utilities for ABC Retailers
"""

import json
import logging
import sys
from datetime import datetime
from typing import Optional

from .config import LoggingSettings

ROOT_LOGGER_NAME = "abcretailers"
TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class StructuredLogger:
    """
    Structured logger that outputs JSON logs for easy parsing and querying
    """

    def __init__(self, name: str, level: Optional[int] = None):
        self.logger = logging.getLogger(name)
        if level is not None:
            self.logger.setLevel(level)

        # Loggers under "abcretailers" get their handler from configure_logging
        if not name.startswith(ROOT_LOGGER_NAME) and not self.logger.hasHandlers():
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(JSONFormatter())
            self.logger.addHandler(handler)

    def log(self, level: str, message: str, **kwargs):
        """Log with structured data"""
        log_method = getattr(self.logger, level, self.logger.info)
        log_method(message, extra={"extra_data": kwargs})

    def info(self, message: str, **kwargs):
        self.log("info", message, **kwargs)

    def warning(self, message: str, **kwargs):
        self.log("warning", message, **kwargs)

    def error(self, message: str, **kwargs):
        self.log("error", message, **kwargs)

    def debug(self, message: str, **kwargs):
        self.log("debug", message, **kwargs)


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.utcnow().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add exception info if present
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        # Add extra fields if present
        if hasattr(record, "extra_data"):
            log_obj.update(record.extra_data)

        return json.dumps(log_obj, default=str)


def configure_logging(settings: Optional[LoggingSettings] = None) -> logging.Logger:
    """
    Attach a single stdout handler to the ``abcretailers`` logger.

    Safe to call more than once: an existing handler is reconfigured rather
    than duplicated.
    """
    settings = settings or LoggingSettings()
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(settings.level)

    formatter: logging.Formatter
    if settings.format == "json":
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT)

    handler = next(
        (h for h in logger.handlers if getattr(h, "_abcretailers_handler", False)),
        None,
    )
    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
        handler._abcretailers_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    handler.setFormatter(formatter)
    return logger


def get_logger(name: str) -> StructuredLogger:
    """Get or create a structured logger"""
    return StructuredLogger(name)

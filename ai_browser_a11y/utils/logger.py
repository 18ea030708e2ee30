"""Logging configuration for AI Browser A11y."""

import logging
import os
import sys
from enum import IntEnum
from typing import Any, Dict, List, Optional

import structlog


class LogLevel(IntEnum):
    """Log levels, ordered by verbosity."""
    ERROR = 0
    WARN = 1
    INFO = 2
    DEBUG = 3


_STDLIB_LEVELS = {
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARN: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
}


def configure_logging(verbose: int = 0) -> structlog.BoundLogger:
    """
    Configure structlog for AI Browser A11y.

    Args:
        verbose: Verbosity level (0-3)

    Returns:
        Configured logger instance
    """
    level = LogLevel(max(0, min(int(verbose), LogLevel.DEBUG)))

    processors: List[Any] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if sys.stderr.isatty() and os.getenv("NO_COLOR") is None:
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=_STDLIB_LEVELS[level],
    )

    return structlog.get_logger("ai_browser_a11y").bind(verbose=verbose)


class LogLine:
    """A single categorised log entry."""

    def __init__(
        self,
        category: str,
        message: str,
        level: LogLevel = LogLevel.INFO,
        auxiliary: Optional[Dict[str, Any]] = None,
    ):
        self.category = category
        self.message = message
        self.level = level
        self.auxiliary = auxiliary or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "level": self.level.name,
            **self.auxiliary,
        }


class A11yLogger:
    """Category-aware wrapper around a bound structlog logger."""

    def __init__(self, logger: Optional[structlog.BoundLogger] = None, verbose: int = 0):
        self.logger = logger if logger is not None else structlog.get_logger("ai_browser_a11y")
        self.verbose = verbose

    def log(self, log_line: LogLine) -> None:
        """Emit a log line if the configured verbosity allows it."""
        if log_line.level.value > self.verbose:
            return

        method = "warning" if log_line.level == LogLevel.WARN else log_line.level.name.lower()
        getattr(self.logger, method)(log_line.message, **log_line.to_dict())

    def error(self, category: str, message: str, **kwargs: Any) -> None:
        self.log(LogLine(category, message, LogLevel.ERROR, kwargs))

    def warn(self, category: str, message: str, **kwargs: Any) -> None:
        self.log(LogLine(category, message, LogLevel.WARN, kwargs))

    def info(self, category: str, message: str, **kwargs: Any) -> None:
        self.log(LogLine(category, message, LogLevel.INFO, kwargs))

    def debug(self, category: str, message: str, **kwargs: Any) -> None:
        self.log(LogLine(category, message, LogLevel.DEBUG, kwargs))

    def child(self, **bindings: Any) -> "A11yLogger":
        """Create a child logger with additional bound context."""
        return A11yLogger(self.logger.bind(**bindings), self.verbose)

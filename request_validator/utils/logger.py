"""
Request Validator Logger
========================

Structured logging for compilation, evaluation and reporting.
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, Dict, List, Optional, TextIO, Union


class LogLevel(IntEnum):
    """Log levels."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def parse(cls, value: Union[str, int, "LogLevel"]) -> "LogLevel":
        """
        Resolve a level from a name or number.

        Unknown names fall back to WARNING.
        """
        if isinstance(value, LogLevel):
            return value
        if isinstance(value, int):
            return cls(value)
        return cls.__members__.get(str(value).upper(), cls.WARNING)


@dataclass
class LogRecord:
    """
    Structured log record.

    Attributes:
        level: Log level
        message: Log message
        timestamp: Record timestamp
        context: Additional context
        exception: Exception info
    """

    level: LogLevel
    message: str
    timestamp: datetime = field(default_factory=datetime.now)
    context: Dict[str, Any] = field(default_factory=dict)
    exception: Optional[BaseException] = None
    logger_name: str = "request_validator"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = {
            "timestamp": self.timestamp.isoformat(),
            "level": self.level.name,
            "message": self.message,
            "logger": self.logger_name,
        }

        if self.context:
            data["context"] = self.context

        if self.exception:
            data["exception"] = {
                "type": type(self.exception).__name__,
                "message": str(self.exception),
            }

        return data

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), default=str, ensure_ascii=False)


class LogFormatter:
    """Base log formatter."""

    def format(self, record: LogRecord) -> str:
        """Format log record."""
        raise NotImplementedError


class TextFormatter(LogFormatter):
    """
    Plain text formatter.

    Example output:
        2024-01-15 10:30:45 [INFO] Request validation failed fields=['name']
    """

    def __init__(
        self,
        format_string: Optional[str] = None,
        date_format: str = "%Y-%m-%d %H:%M:%S",
    ):
        self.format_string = format_string or "{timestamp} [{level}] {message}"
        self.date_format = date_format

    def format(self, record: LogRecord) -> str:
        """Format as text."""
        message = record.message

        # Context as key=value pairs
        if record.context:
            context_str = " ".join(
                f"{k}={v}" for k, v in record.context.items()
            )
            message = f"{message} {context_str}"

        output = self.format_string.format(
            timestamp=record.timestamp.strftime(self.date_format),
            level=record.level.name,
            message=message,
            logger=record.logger_name,
        )

        if record.exception:
            output += "\n" + "".join(
                traceback.format_exception(
                    type(record.exception),
                    record.exception,
                    record.exception.__traceback__,
                )
            )

        return output


class JsonFormatter(LogFormatter):
    """JSON formatter for structured logging."""

    def format(self, record: LogRecord) -> str:
        return record.to_json()


class StreamHandler:
    """Writes formatted records to a stream (stderr by default)."""

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        formatter: Optional[LogFormatter] = None,
        level: LogLevel = LogLevel.DEBUG,
    ):
        self.stream = stream or sys.stderr
        self.formatter = formatter or TextFormatter()
        self.level = level

    def handle(self, record: LogRecord) -> None:
        """Emit the record if it passes the handler level."""
        if record.level >= self.level:
            self.stream.write(self.formatter.format(record) + "\n")
            self.stream.flush()


class Logger:
    """
    Structured logger.

    Example:
        logger = get_logger("request_validator.form")

        logger.info("Request validation failed", fields=["name"])

        # With context
        logger = logger.with_context(resource="User")
        logger.debug("Compiled validator")
    """

    def __init__(
        self,
        name: str = "request_validator",
        level: LogLevel = LogLevel.WARNING,
        handlers: Optional[List[StreamHandler]] = None,
    ):
        self.name = name
        self.level = level
        self._handlers = handlers if handlers is not None else []
        self._context: Dict[str, Any] = {}

    @property
    def handlers(self) -> List[StreamHandler]:
        return list(self._handlers)

    def add_handler(self, handler: StreamHandler) -> "Logger":
        """Add log handler."""
        self._handlers.append(handler)
        return self

    def with_context(self, **context: Any) -> "Logger":
        """
        Create logger with additional context.

        Args:
            **context: Context key-values

        Returns:
            New logger sharing handlers and level
        """
        new_logger = Logger(
            name=self.name,
            level=self.level,
            handlers=self._handlers,
        )
        new_logger._context = {**self._context, **context}
        return new_logger

    def is_enabled_for(self, level: LogLevel) -> bool:
        return level >= self.level

    def _log(
        self,
        level: LogLevel,
        message: str,
        exception: Optional[BaseException] = None,
        **context: Any,
    ) -> None:
        if level < self.level:
            return

        record = LogRecord(
            level=level,
            message=message,
            context={**self._context, **context},
            exception=exception,
            logger_name=self.name,
        )

        for handler in self._handlers:
            try:
                handler.handle(record)
            except Exception:
                pass  # Logging must never break validation

    def debug(self, message: str, **context: Any) -> None:
        self._log(LogLevel.DEBUG, message, **context)

    def info(self, message: str, **context: Any) -> None:
        self._log(LogLevel.INFO, message, **context)

    def warning(self, message: str, **context: Any) -> None:
        self._log(LogLevel.WARNING, message, **context)

    def error(
        self,
        message: str,
        exception: Optional[BaseException] = None,
        **context: Any,
    ) -> None:
        self._log(LogLevel.ERROR, message, exception, **context)


# Global logger registry
_loggers: Dict[str, Logger] = {}
_root_handlers: List[StreamHandler] = []
_root_level: Optional[LogLevel] = None


def _default_level() -> LogLevel:
    if _root_level is not None:
        return _root_level
    from request_validator.core.config import get_config
    return LogLevel.parse(get_config().get("logging.level", "WARNING"))


def get_logger(
    name: str = "request_validator",
    level: Optional[LogLevel] = None,
) -> Logger:
    """
    Get or create logger.

    Loggers share the handlers installed by `configure_logging`; a
    default stderr handler is installed on first use.

    Args:
        name: Logger name
        level: Log level (defaults to ``logging.level`` from config)

    Returns:
        Logger instance
    """
    if name not in _loggers:
        if not _root_handlers:
            _root_handlers.append(StreamHandler())
        _loggers[name] = Logger(
            name=name,
            level=level if level is not None else _default_level(),
            handlers=_root_handlers,
        )
    elif level is not None:
        _loggers[name].level = level

    return _loggers[name]


def configure_logging(
    level: Union[LogLevel, str, None] = None,
    format: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> Logger:
    """
    Configure package logging.

    Replaces the shared handler and re-levels every logger created so far.

    Args:
        level: Log level (defaults to ``logging.level`` from config)
        format: Output format ("text" or "json"; defaults to ``logging.format``)
        stream: Output stream (stderr when omitted)

    Returns:
        The package root logger
    """
    global _root_level
    from request_validator.core.config import get_config

    config = get_config()
    resolved = LogLevel.parse(level if level is not None else config.get("logging.level", "WARNING"))
    output = format or config.get("logging.format", "text")
    formatter: LogFormatter = JsonFormatter() if output == "json" else TextFormatter()

    _root_handlers.clear()
    _root_handlers.append(StreamHandler(stream=stream, formatter=formatter, level=resolved))
    _root_level = resolved

    for logger in _loggers.values():
        logger.level = resolved

    return get_logger("request_validator")

"""
Request Validator Utils
=======================

Logging and collection helpers.
"""

from __future__ import annotations

from request_validator.utils.helpers import deep_merge, iter_leaves, unique
from request_validator.utils.logger import (
    JsonFormatter,
    Logger,
    LogLevel,
    StreamHandler,
    TextFormatter,
    configure_logging,
    get_logger,
)

__all__ = [
    # Logging
    "Logger",
    "LogLevel",
    "StreamHandler",
    "TextFormatter",
    "JsonFormatter",
    "get_logger",
    "configure_logging",
    # Collection helpers
    "unique",
    "iter_leaves",
    "deep_merge",
]

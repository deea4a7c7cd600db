"""
Request Validator Error Reporter
================================

Turns an error tree into the failure raised to callers.

Without a handler the message lists every distinct message per field:

    Request Validation Error.
    [name]: Name is required
    [children]: Age is required

With a handler, ``handler(field, field_errors, extra)`` is called once per
failing field and is expected to raise its own `ValidationError`.
"""

from __future__ import annotations

from typing import Any, Callable, List, Mapping, Optional

from request_validator.core.config import get_config
from request_validator.utils.helpers import iter_leaves, unique
from request_validator.utils.logger import get_logger
from request_validator.validation.classifier import NESTED_ERROR_THRESHOLD, is_nested
from request_validator.validation.exceptions import ValidationError

logger = get_logger("request_validator.reporter")

ErrorHandler = Callable[[str, Mapping[Any, Any], Optional[Mapping[str, Any]]], None]


def flatten_messages(field_errors: Mapping[Any, Any]) -> List[str]:
    """
    Distinct messages of one field, in order of first occurrence.

    Example:
        >>> flatten_messages({0: {"age": {"_required": "required"}},
        ...                   1: {"age": {"_required": "required"}}})
        ['required']
    """
    if is_nested(field_errors, NESTED_ERROR_THRESHOLD):
        leaves = iter_leaves(field_errors)
    else:
        leaves = iter_leaves(field_errors, depth=NESTED_ERROR_THRESHOLD)
    return unique(str(message) for message in leaves)


class ErrorReporter:
    """
    Reports collected errors.

    Example:
        reporter = ErrorReporter()
        reporter.report({"name": {"_required": "Name is required"}})
        # ValidationError: Request Validation Error.\\n[name]: Name is required
    """

    def __init__(
        self,
        error_handler: Optional[ErrorHandler] = None,
        header: Optional[str] = None,
        status_code: Optional[int] = None,
        soft: bool = False,
    ) -> None:
        """
        Initialize reporter.

        Args:
            error_handler: Per-field callback expected to raise
            header: First line of the default message
                (``validation.error_header`` when omitted)
            status_code: Classifier of raised failures
                (``validation.status_code`` when omitted)
            soft: When every handler call returns, return instead of raising
        """
        config = get_config()
        self.error_handler = error_handler
        self.header = header if header is not None else config.get(
            "validation.error_header", "Request Validation Error."
        )
        self.status_code = status_code if status_code is not None else config.get_int(
            "validation.status_code", 422
        )
        self.soft = soft

    def format(self, errors: Mapping[str, Mapping[Any, Any]]) -> str:
        """Default failure text: the header plus one line per distinct message."""
        lines = [self.header]
        for field, field_errors in errors.items():
            for message in flatten_messages(field_errors):
                lines.append(f"[{field}]: {message}")
        return "\n".join(lines)

    def report(
        self,
        errors: Mapping[str, Mapping[Any, Any]],
        extra: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """
        Raise the failure for a non-empty error tree.

        Args:
            errors: Error tree from the evaluator
            extra: Caller context handed to the error handler untouched

        Raises:
            ValidationError: Default failure, or whatever the handler raises
        """
        if not errors:
            return

        if self.error_handler is None:
            raise ValidationError(self.format(errors), self.status_code, dict(errors))

        for field, field_errors in errors.items():
            self.error_handler(field, field_errors, extra)

        logger.warning(
            "Error handler returned without raising",
            fields=list(errors),
            soft=self.soft,
        )
        if self.soft:
            return

        raise ValidationError(self.header, self.status_code, dict(errors))

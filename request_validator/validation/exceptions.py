"""
Request Validator Exceptions
============================

Error taxonomy of the validation engine.

- ConfigurationError: the rule settings cannot be compiled
- FieldError: one failed check on one field (collected, never raised)
- ValidationError: the failure raised to callers once errors exist
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union


class RequestValidatorError(Exception):
    """Base request validator error."""
    pass


class ConfigurationError(RequestValidatorError):
    """
    Rule settings are malformed.

    Raised while compiling, never while evaluating a record.
    """

    def __init__(self, message: str, path: Tuple[str, ...] = ()) -> None:
        self.path = tuple(path)
        if self.path:
            message = f"{'.'.join(self.path)}: {message}"
        super().__init__(message)


class ValidationError(RequestValidatorError):
    """
    Request data failed validation.

    Attributes:
        message: Human-readable failure text
        status_code: HTTP-like classifier, 422 (Unprocessable Entity) by default
        errors: The error tree that produced the failure
    """

    def __init__(
        self,
        message: str = "Request Validation Error.",
        status_code: int = 422,
        errors: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors or {}

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form, e.g. for an API error body."""
        return {
            "status": self.status_code,
            "message": self.message,
            "errors": self.errors,
        }


@dataclass(frozen=True)
class FieldError:
    """
    One failed check.

    Attributes:
        field: Dotted location of the field (``children.0.age`` for nested rows)
        check: Check name (``_required``, ``_empty``, ``_nested`` or ``field.rule``)
        message: Configured failure message
    """

    field: str
    check: Union[str, int]
    message: str

"""
Request Validator Form
======================

Entry point tying compilation, evaluation and reporting together.

Example:
    form = ValidationForm({
        "name": {
            "rules": {
                "require": {"message": "Name is required"},
                "maxLength": {"option": 20, "message": "Name is too long"},
            },
        },
    })

    form.execute({"name": "Alice"})     # True
    form.execute({})                    # raises ValidationError

    # Resource-aware messages
    def handler(field, errors, extra):
        raise ValidationError(f"{extra['resourceName']}.{field} is invalid")

    ValidationForm(settings, {"resourceName": "User"}, handler)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from request_validator.core.config import DEFAULTS, Config, get_config
from request_validator.utils.logger import get_logger
from request_validator.validation.compiler import CompiledValidator, RuleCompiler
from request_validator.validation.evaluator import Evaluator, collect_field_errors
from request_validator.validation.exceptions import FieldError, ValidationError
from request_validator.validation.reporter import ErrorHandler, ErrorReporter, flatten_messages
from request_validator.validation.rules import RuleRegistry

logger = get_logger("request_validator.form")


@dataclass
class ValidationResult:
    """
    Outcome of validating one record.

    Attributes:
        valid: True when no check failed
        errors: Error tree, field -> check -> message (rows keyed by index)
    """

    valid: bool
    errors: Dict[str, Any] = field(default_factory=dict)

    def __bool__(self) -> bool:
        """Allow using result as boolean."""
        return self.valid

    def failed(self) -> bool:
        return not self.valid

    def has_error(self, field_name: str) -> bool:
        return field_name in self.errors

    def messages(self, field_name: str) -> List[str]:
        """Distinct messages of one field."""
        return flatten_messages(self.errors.get(field_name, {}))

    def all_messages(self) -> List[str]:
        """Distinct messages per field, fields in order."""
        all_msgs = []
        for field_name in self.errors:
            all_msgs.extend(self.messages(field_name))
        return all_msgs

    def field_errors(self) -> List[FieldError]:
        """Every failed check with its dotted field location."""
        return collect_field_errors(self.errors)

    def raise_if_invalid(self, status_code: Optional[int] = None, header: Optional[str] = None) -> None:
        """
        Raise the default failure if invalid.

        The message has the same header and ``[field]: message`` lines
        as `ValidationForm.execute` without an error handler.
        """
        if not self.valid:
            reporter = ErrorReporter(header=header, status_code=status_code)
            raise ValidationError(
                reporter.format(self.errors),
                status_code=reporter.status_code,
                errors=self.errors,
            )


class ValidationForm:
    """
    Validates request data against declarative rule settings.

    The settings are compiled once in the constructor; `execute` and
    `validate` can then be called any number of times.
    """

    def __init__(
        self,
        settings: Mapping[str, Any],
        extra: Optional[Mapping[str, Any]] = None,
        error_handler: Optional[ErrorHandler] = None,
        *,
        registry: Optional[RuleRegistry] = None,
        soft_handler: bool = False,
        config: Optional[Config] = None,
    ) -> None:
        """
        Initialize form.

        Args:
            settings: Field name -> field settings or nested group
            extra: Caller context passed to the error handler
                (e.g. ``{"resourceName": "User"}``)
            error_handler: ``(field, field_errors, extra)`` callback that
                raises a custom failure
            registry: Rule registry (built-in rules when omitted)
            soft_handler: Let `execute` return False when the handler
                returns instead of raising
            config: Configuration (the global one when omitted)

        Raises:
            ConfigurationError: Malformed settings
        """
        config = config or get_config()
        self.extra = extra
        self._validator = RuleCompiler(registry).compile(settings)
        defaults = DEFAULTS["validation"]
        self._evaluator = Evaluator(
            nested_message=config.get("validation.nested_message", defaults["nested_message"]),
        )
        self._reporter = ErrorReporter(
            error_handler=error_handler,
            header=config.get("validation.error_header", defaults["error_header"]),
            status_code=config.get_int("validation.status_code", defaults["status_code"]),
            soft=soft_handler,
        )

    @property
    def validator(self) -> CompiledValidator:
        return self._validator

    def validate(self, data: Mapping[str, Any]) -> ValidationResult:
        """
        Validate data without raising.

        Args:
            data: Request data

        Returns:
            ValidationResult with the error tree
        """
        errors = self._evaluator.evaluate(self._validator, data)
        return ValidationResult(valid=not errors, errors=errors)

    def execute(self, data: Mapping[str, Any]) -> bool:
        """
        Validate data and report failures.

        Args:
            data: Request data

        Returns:
            True when valid; False only in soft handler mode

        Raises:
            ValidationError: Data is invalid (or the handler's own failure)
        """
        result = self.validate(data)
        if result.valid:
            return True

        logger.info("Request validation failed", fields=list(result.errors))
        self._reporter.report(result.errors, self.extra)
        return False


def validate_or_fail(
    data: Mapping[str, Any],
    settings: Mapping[str, Any],
    extra: Optional[Mapping[str, Any]] = None,
    error_handler: Optional[ErrorHandler] = None,
    registry: Optional[RuleRegistry] = None,
) -> bool:
    """
    Validate data and raise on failure.

    Convenience wrapper compiling a one-off `ValidationForm`.

    Example:
        try:
            validate_or_fail(
                payload,
                {"email": {"rules": {"email": {"message": "Invalid email"}}}},
            )
        except ValidationError as e:
            return {"status": e.status_code, "message": e.message}
    """
    form = ValidationForm(settings, extra, error_handler, registry=registry)
    return form.execute(data)

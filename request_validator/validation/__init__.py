"""
Request Validator Validation System
===================================

Declarative request validation.

Features:
- Rule settings compiled once into a validator graph
- Nested groups detected from the settings structure
- Static and predicate ``when`` gates
- Pluggable rule registry
- Default or handler-driven error reporting
"""

from request_validator.validation.classifier import (
    NESTED_ERROR_THRESHOLD,
    NESTED_RULE_THRESHOLD,
    depth,
    is_nested,
)
from request_validator.validation.compiler import (
    CompiledValidator,
    FieldPlan,
    RuleCheck,
    RuleCompiler,
    option_arguments,
)
from request_validator.validation.conditions import Condition, should_run
from request_validator.validation.evaluator import Evaluator, collect_field_errors
from request_validator.validation.exceptions import (
    ConfigurationError,
    FieldError,
    RequestValidatorError,
    ValidationError,
)
from request_validator.validation.form import ValidationForm, ValidationResult, validate_or_fail
from request_validator.validation.reporter import ErrorReporter, flatten_messages
from request_validator.validation.rules import (
    Rule,
    RuleRegistry,
    default_registry,
    is_empty,
)

__all__ = [
    # Form
    "ValidationForm",
    "ValidationResult",
    "validate_or_fail",
    # Engine
    "RuleCompiler",
    "CompiledValidator",
    "FieldPlan",
    "RuleCheck",
    "option_arguments",
    "Evaluator",
    "collect_field_errors",
    "ErrorReporter",
    "flatten_messages",
    "Condition",
    "should_run",
    "depth",
    "is_nested",
    "NESTED_RULE_THRESHOLD",
    "NESTED_ERROR_THRESHOLD",
    # Rules
    "Rule",
    "RuleRegistry",
    "default_registry",
    "is_empty",
    # Errors
    "RequestValidatorError",
    "ConfigurationError",
    "ValidationError",
    "FieldError",
]

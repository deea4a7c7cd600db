"""
Request Validator
=================

Declarative request validation: describe per-field rules once, validate
incoming data trees against them, and get either success or a structured
422-style failure.

Features:
---------
- Rule settings compiled once into an immutable validator graph
- Nested groups (lists of child records) detected structurally
- Conditional rules with static or predicate ``when`` gates
- Pluggable rule registry with common built-in checks
- Default multi-line failure messages or custom error handlers
- Layered configuration and structured logging

Quick Start:
    from request_validator import ValidationForm

    form = ValidationForm({
        "name": {"rules": {"require": {"message": "Name is required"}}},
    })
    form.execute({"name": "Alice"})   # True
"""

from __future__ import annotations

__version__ = "1.0.0"
__license__ = "MIT"

from typing import TYPE_CHECKING

# Core imports (always available)
from request_validator.validation.exceptions import (
    ConfigurationError,
    RequestValidatorError,
    ValidationError,
)
from request_validator.validation.form import ValidationForm, ValidationResult, validate_or_fail

# Lazy imports for performance
if TYPE_CHECKING:
    from request_validator.core.config import Config
    from request_validator.utils.logger import Logger
    from request_validator.validation.compiler import CompiledValidator, RuleCompiler
    from request_validator.validation.evaluator import Evaluator
    from request_validator.validation.reporter import ErrorReporter
    from request_validator.validation.rules import Rule, RuleRegistry


def __getattr__(name: str):
    """Lazy loading of engine components."""
    _imports = {
        # Engine
        "RuleCompiler": "request_validator.validation.compiler",
        "CompiledValidator": "request_validator.validation.compiler",
        "Evaluator": "request_validator.validation.evaluator",
        "ErrorReporter": "request_validator.validation.reporter",
        "Condition": "request_validator.validation.conditions",
        # Rules
        "Rule": "request_validator.validation.rules",
        "RuleRegistry": "request_validator.validation.rules",
        "default_registry": "request_validator.validation.rules",
        # Utils
        "Config": "request_validator.core.config",
        "get_config": "request_validator.core.config",
        "Logger": "request_validator.utils.logger",
        "configure_logging": "request_validator.utils.logger",
    }

    if name in _imports:
        import importlib
        module = importlib.import_module(_imports[name])
        return getattr(module, name)

    raise AttributeError(f"module 'request_validator' has no attribute '{name}'")


__all__ = [
    # Metadata
    "__version__",
    "__license__",
    # Core (always loaded)
    "ValidationForm",
    "ValidationResult",
    "validate_or_fail",
    "RequestValidatorError",
    "ConfigurationError",
    "ValidationError",
    # Engine (lazy)
    "RuleCompiler",
    "CompiledValidator",
    "Evaluator",
    "ErrorReporter",
    "Condition",
    # Rules (lazy)
    "Rule",
    "RuleRegistry",
    "default_registry",
    # Utils (lazy)
    "Config",
    "get_config",
    "Logger",
    "configure_logging",
]

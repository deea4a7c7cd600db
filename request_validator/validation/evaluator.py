"""
Request Validator Evaluator
===========================

Runs a compiled validator against one record and collects every failure.

Per field, in settings order:
1. Key missing: report ``_required`` when the presence gate is active,
   then move on.
2. Empty value: report ``_empty`` when the non-empty gate is active;
   either way no further check runs for the field.
3. Nested group: the value must be a list of records, each checked
   against the child validator; failures are keyed by row index.
4. Otherwise every active rule runs and every failure is kept.

Result shape:

    {
        "name": {"_required": "Name is required"},
        "children": {0: {"age": {"age.isInteger": "Age must be an integer"}}},
    }
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional

from request_validator.core.config import get_config
from request_validator.validation.compiler import (
    EMPTY_CHECK,
    NESTED_CHECK,
    REQUIRED_CHECK,
    CompiledValidator,
    FieldPlan,
)
from request_validator.validation.exceptions import FieldError
from request_validator.validation.rules import is_empty

ErrorTree = Dict[str, Any]


class Evaluator:
    """
    Applies a `CompiledValidator` to records.

    Holds no per-run state; one instance can serve any number of calls.

    Example:
        errors = Evaluator().evaluate(validator, {"name": ""})
        if not errors:
            print("valid")
    """

    def __init__(
        self,
        nested_message: Optional[str] = None,
        empty: Callable[[Any], bool] = is_empty,
    ) -> None:
        """
        Initialize evaluator.

        Args:
            nested_message: Error for a nested group whose value is not a
                list of records (``validation.nested_message`` when omitted)
            empty: Emptiness test for present values
        """
        self.nested_message = (
            nested_message
            if nested_message is not None
            else get_config().get("validation.nested_message", "The provided value is invalid")
        )
        self.empty = empty

    def evaluate(self, validator: CompiledValidator, record: Mapping[str, Any]) -> ErrorTree:
        """
        Validate one record.

        Args:
            validator: Compiled validator
            record: Data to validate

        Returns:
            Error tree, empty when the record is valid
        """
        if not isinstance(record, Mapping):
            raise TypeError(f"Record must be a mapping, got {type(record).__name__}")

        errors: ErrorTree = {}
        for plan in validator:
            field_errors = self._evaluate_field(plan, record)
            if field_errors:
                errors[plan.field] = field_errors
        return errors

    def _evaluate_field(self, plan: FieldPlan, record: Mapping[str, Any]) -> Dict[Any, Any]:
        if plan.field not in record:
            if plan.presence.should_run(record):
                return {REQUIRED_CHECK: plan.presence_message}
            return {}

        value = record[plan.field]

        if self.empty(value):
            if plan.not_empty.should_run(record):
                return {EMPTY_CHECK: plan.empty_message}
            return {}

        if plan.nested is not None:
            return self._evaluate_nested(plan.nested, value)

        errors: Dict[Any, Any] = {}
        for check in plan.checks:
            if not check.when.should_run(record):
                continue
            if not check.rule.validate(value, plan.field, record):
                errors[check.name] = check.message
        return errors

    def _evaluate_nested(self, validator: CompiledValidator, rows: Any) -> Dict[Any, Any]:
        if not isinstance(rows, (list, tuple)):
            return {NESTED_CHECK: self.nested_message}
        if not all(isinstance(row, Mapping) for row in rows):
            return {NESTED_CHECK: self.nested_message}

        errors: Dict[Any, Any] = {}
        for index, row in enumerate(rows):
            row_errors = self.evaluate(validator, row)
            if row_errors:
                errors[index] = row_errors
        return errors


def collect_field_errors(errors: Mapping[Any, Any], prefix: str = "") -> List[FieldError]:
    """
    List every failed check in an error tree.

    Nested rows contribute dotted locations such as ``children.0.age``.

    Example:
        >>> collect_field_errors({"name": {"_required": "required"}})
        [FieldError(field='name', check='_required', message='required')]
    """
    found: List[FieldError] = []
    for key, value in errors.items():
        location = f"{prefix}.{key}" if prefix else str(key)
        found.extend(_collect(location, value))
    return found


def _collect(location: str, field_errors: Mapping[Any, Any]) -> List[FieldError]:
    found: List[FieldError] = []
    for key, value in field_errors.items():
        if isinstance(value, Mapping):
            # Row index -> child error tree
            found.extend(collect_field_errors(value, f"{location}.{key}"))
        else:
            found.append(FieldError(field=location, check=key, message=value))
    return found

"""
Request Validator Compiler
==========================

Turns declarative rule settings into an executable validator graph.

Settings shape:

    {
        "name": {
            "rules": {
                "require": {"message": "Name is required"},
                "maxLength": {"option": 20, "message": "Name is too long"},
            },
        },
        "children": {                       # nested group: a list of records
            "age": {
                "rules": {
                    "isInteger": {"message": "Age must be an integer"},
                },
            },
        },
    }

Each rule takes ``message``, an optional ``option`` (scalar, or list of
arguments) and an optional ``when`` gate (bool or ``record -> bool``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from request_validator.utils.logger import get_logger
from request_validator.validation.classifier import OPTION_KEY, is_nested
from request_validator.validation.conditions import ALWAYS, NEVER, Condition
from request_validator.validation.exceptions import ConfigurationError
from request_validator.validation.rules import Rule, RuleRegistry, default_registry

logger = get_logger("request_validator.compiler")

RULES_KEY = "rules"
REQUIRE_RULE = "require"
PATH_SEPARATOR = "."
RULE_SPEC_KEYS = frozenset({"message", "option", "when"})
DEFAULT_REQUIRE_MESSAGE = "The {field} field is required"

# Error keys shared with the evaluator
REQUIRED_CHECK = "_required"
EMPTY_CHECK = "_empty"
NESTED_CHECK = "_nested"


@dataclass(frozen=True)
class RuleCheck:
    """
    A named rule bound to one field.

    Attributes:
        name: Error key, ``"{field}.{rule_name}"``
        rule_name: Registry name of the rule
        rule: Rule instance built with the option arguments
        message: Failure message
        when: Gate deciding whether the rule runs
    """

    name: str
    rule_name: str
    rule: Rule
    message: str
    when: Condition


@dataclass(frozen=True)
class FieldPlan:
    """
    Everything checked for one field.

    ``presence`` gates the required-key check and ``not_empty`` the
    non-empty check. A plan with ``nested`` set validates every record
    of a list against that child validator.
    """

    field: str
    presence: Condition = NEVER
    presence_message: str = ""
    not_empty: Condition = NEVER
    empty_message: str = ""
    checks: Tuple[RuleCheck, ...] = ()
    nested: Optional["CompiledValidator"] = None

    @property
    def is_nested(self) -> bool:
        return self.nested is not None


@dataclass(frozen=True)
class CompiledValidator:
    """Immutable validator graph, in settings order."""

    fields: Tuple[FieldPlan, ...] = ()

    def __iter__(self) -> Iterator[FieldPlan]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def field_names(self) -> List[str]:
        return [plan.field for plan in self.fields]

    def get(self, field: str) -> Optional[FieldPlan]:
        """Plan for a field, or None."""
        for plan in self.fields:
            if plan.field == field:
                return plan
        return None


def option_arguments(option: Any) -> Tuple[Any, ...]:
    """
    Arguments passed to a rule factory.

    A list option is splatted, a scalar becomes the single argument.
    Only ``None`` means "no arguments": falsy options such as ``0`` or
    ``""`` are passed through (``naturalNumber`` with ``option: 0`` gets
    ``allow_zero=0``), and an empty list gives no arguments.

    Example:
        >>> option_arguments([5, 10])
        (5, 10)
        >>> option_arguments(20)
        (20,)
        >>> option_arguments(0)
        (0,)
    """
    if option is None:
        return ()
    if isinstance(option, (list, tuple)):
        return tuple(option)
    return (option,)


class RuleCompiler:
    """
    Compiles validation settings once into a `CompiledValidator`.

    Example:
        compiler = RuleCompiler()
        validator = compiler.compile({
            "name": {"rules": {"require": {"message": "Name is required"}}},
        })
    """

    def __init__(self, registry: Optional[RuleRegistry] = None) -> None:
        self.registry = registry if registry is not None else default_registry()

    def compile(self, settings: Mapping[str, Any]) -> CompiledValidator:
        """
        Compile validation settings.

        Args:
            settings: Field name -> field settings or nested group

        Returns:
            The compiled validator

        Raises:
            ConfigurationError: Malformed settings
        """
        validator = self._compile_group(settings, ())

        logger.debug(
            "Compiled validator",
            fields=validator.field_names(),
            nested=[plan.field for plan in validator if plan.is_nested],
        )
        return validator

    def _compile_group(
        self,
        settings: Mapping[str, Any],
        path: Tuple[str, ...],
    ) -> CompiledValidator:
        if not isinstance(settings, Mapping):
            raise ConfigurationError("Validation settings must be a mapping", path)

        plans = []
        for field, field_settings in settings.items():
            field_path = path + (str(field),)
            self._check_field_name(field, field_path, nested=bool(path))
            plans.append(self._compile_entry(field, field_settings, field_path))

        return CompiledValidator(fields=tuple(plans))

    def _check_field_name(self, field: Any, path: Tuple[str, ...], nested: bool) -> None:
        if not isinstance(field, str) or not field:
            raise ConfigurationError(f"Field names must be non-empty strings, got {field!r}", path)
        if PATH_SEPARATOR in field:
            raise ConfigurationError(
                f"Field name {field!r} must not contain '{PATH_SEPARATOR}'", path
            )
        if nested and field == OPTION_KEY:
            raise ConfigurationError(f"'{OPTION_KEY}' is reserved and cannot name a nested field", path)

    def _compile_entry(
        self,
        field: str,
        field_settings: Any,
        path: Tuple[str, ...],
    ) -> FieldPlan:
        if not isinstance(field_settings, Mapping):
            raise ConfigurationError("Field settings must be a mapping", path)

        if is_nested(field_settings):
            return FieldPlan(field=field, nested=self._compile_group(field_settings, path))

        if RULES_KEY not in field_settings:
            if OPTION_KEY in field_settings:
                raise ConfigurationError(
                    f"'{OPTION_KEY}' is reserved and cannot name a nested field", path
                )
            raise ConfigurationError(f"Missing '{RULES_KEY}'", path)

        return self.build_field(field, field_settings[RULES_KEY], path)

    def build_field(
        self,
        field: str,
        rules: Mapping[str, Any],
        path: Sequence[str] = (),
    ) -> FieldPlan:
        """
        Build the flat check-set of one field.

        Args:
            field: Field name
            rules: Rule name -> rule spec
            path: Settings location, for error messages

        Returns:
            The field plan
        """
        path = tuple(path) or (field,)
        if not isinstance(rules, Mapping):
            raise ConfigurationError(f"'{RULES_KEY}' must be a mapping", path)

        required: Dict[str, Any] = {}
        checks = []

        for rule_name, spec in rules.items():
            rule_path = path + (RULES_KEY, str(rule_name))
            message, option, when = self._read_spec(spec, rule_path)

            if rule_name == REQUIRE_RULE:
                required = self._build_require(field, message, when, rule_path)
            else:
                checks.append(self._build_check(field, rule_name, message, option, when, rule_path))

        return FieldPlan(field=field, checks=tuple(checks), **required)

    def _read_spec(
        self,
        spec: Any,
        path: Tuple[str, ...],
    ) -> Tuple[Optional[str], Any, Any]:
        if not isinstance(spec, Mapping):
            raise ConfigurationError("Rule settings must be a mapping", path)

        unknown = set(spec) - RULE_SPEC_KEYS
        if unknown:
            raise ConfigurationError(f"Unknown rule setting(s): {', '.join(sorted(map(str, unknown)))}", path)

        message = spec.get("message")
        if message is not None and not isinstance(message, str):
            raise ConfigurationError("'message' must be a string", path)

        return message, spec.get("option"), spec.get("when")

    def _build_require(
        self,
        field: str,
        message: Optional[str],
        when: Any,
        path: Tuple[str, ...],
    ) -> Dict[str, Any]:
        # Static `when` gates presence only, an empty value is always
        # rejected; a predicate gates both checks identically.
        try:
            presence = Condition.from_when(when)
        except ConfigurationError as e:
            raise ConfigurationError(str(e), path) from e

        not_empty = presence if presence.is_dynamic else ALWAYS
        text = message if message is not None else DEFAULT_REQUIRE_MESSAGE.format(field=field)

        return {
            "presence": presence,
            "presence_message": text,
            "not_empty": not_empty,
            "empty_message": text,
        }

    def _build_check(
        self,
        field: str,
        rule_name: Any,
        message: Optional[str],
        option: Any,
        when: Any,
        path: Tuple[str, ...],
    ) -> RuleCheck:
        try:
            condition = Condition.from_when(when)
            rule = self.registry.create(rule_name, option_arguments(option))
        except ConfigurationError as e:
            raise ConfigurationError(str(e), path) from e

        return RuleCheck(
            name=f"{field}.{rule_name}",
            rule_name=rule_name,
            rule=rule,
            message=message if message is not None else rule.get_message(field),
            when=condition,
        )

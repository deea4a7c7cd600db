"""
Request Validator Rules
=======================

Built-in rule checks and the registry that resolves rule names.

Rule settings refer to checks by name (``maxLength``, ``isInteger``...).
The registry turns a name plus its ``option`` arguments into a `Rule`
instance once, at compile time.

Example:
    registry = default_registry()

    @registry.check("isEven")
    def is_even(value):
        return int(value) % 2 == 0

    rule = registry.create("lengthBetween", [5, 10])
    rule.validate("hello", "name", {})   # True
"""

from __future__ import annotations

import json
import operator
import re
import uuid as uuid_module
from abc import ABC, abstractmethod
from dataclasses import dataclass, field as dataclass_field
from datetime import date, datetime
from typing import Any, Callable, ClassVar, Dict, Iterator, List, Mapping, Optional, Pattern, Sequence, Tuple, Union

from request_validator.validation.exceptions import ConfigurationError

RuleFactory = Callable[..., "Rule"]
CheckFunction = Callable[..., bool]


def is_empty(value: Any) -> bool:
    """
    Decide whether a present value counts as empty.

    ``None``, ``""`` and empty collections are empty; ``0``, ``False``
    and whitespace-only strings are not.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple, dict, set, frozenset)):
        return len(value) == 0
    return False


def _check_number(name: str, value: Any, integer: bool = False) -> None:
    """Reject rule arguments that are not numbers (bools included)."""
    expected = (int,) if integer else (int, float)
    if isinstance(value, bool) or not isinstance(value, expected):
        kind = "an integer" if integer else "a number"
        raise ValueError(f"'{name}' must be {kind}, got {value!r}")


class Rule(ABC):
    """
    Abstract validation rule.

    Implement `validate` to create custom rules.

    Example:
        @dataclass
        class IsPositive(Rule):
            message: str = "The {field} must be positive"

            def validate(self, value, field, data) -> bool:
                return isinstance(value, (int, float)) and value > 0
    """

    message: str = "The {field} is invalid"

    @abstractmethod
    def validate(self, value: Any, field: str, data: Mapping[str, Any]) -> bool:
        """
        Validate the value.

        Args:
            value: Value to validate
            field: Field name
            data: Record the field belongs to

        Returns:
            True if valid, False otherwise
        """
        ...

    def get_message(self, field: str, **params: Any) -> str:
        """Default error message, used when the settings give none."""
        return self.message.format(field=field, **params)

    def __call__(self, value: Any, field: str, data: Mapping[str, Any]) -> bool:
        return self.validate(value, field, data)


@dataclass
class CallableRule(Rule):
    """Rule wrapper for plain ``(value, *args) -> bool`` check functions."""

    func: CheckFunction
    args: Tuple[Any, ...] = ()
    name: str = "custom"
    message: str = "The {field} is invalid"

    def validate(self, value: Any, field: str, data: Mapping[str, Any]) -> bool:
        try:
            return bool(self.func(value, *self.args))
        except Exception:
            return False


@dataclass
class MaxLength(Rule):
    """Maximum string length."""

    length: int
    message: str = "The {field} must not exceed {length} characters"

    def __post_init__(self):
        _check_number("length", self.length, integer=True)

    def validate(self, value: Any, field: str, data: Mapping[str, Any]) -> bool:
        if not isinstance(value, str):
            return False
        return len(value) <= self.length

    def get_message(self, field: str, **params: Any) -> str:
        return self.message.format(field=field, length=self.length)


@dataclass
class MinLength(Rule):
    """Minimum string length."""

    length: int
    message: str = "The {field} must be at least {length} characters"

    def __post_init__(self):
        _check_number("length", self.length, integer=True)

    def validate(self, value: Any, field: str, data: Mapping[str, Any]) -> bool:
        if not isinstance(value, str):
            return False
        return len(value) >= self.length

    def get_message(self, field: str, **params: Any) -> str:
        return self.message.format(field=field, length=self.length)


@dataclass
class LengthBetween(Rule):
    """String length within an inclusive range."""

    min_length: int
    max_length: int
    message: str = "The {field} must be between {min} and {max} characters"

    def __post_init__(self):
        _check_number("min_length", self.min_length, integer=True)
        _check_number("max_length", self.max_length, integer=True)

    def validate(self, value: Any, field: str, data: Mapping[str, Any]) -> bool:
        if not isinstance(value, str):
            return False
        return self.min_length <= len(value) <= self.max_length

    def get_message(self, field: str, **params: Any) -> str:
        return self.message.format(field=field, min=self.min_length, max=self.max_length)


@dataclass
class Integer(Rule):
    """Value must be an integer or an integer string."""

    message: str = "The {field} must be an integer"

    _pattern: ClassVar[Pattern] = re.compile(r"^-?\d+$")

    def validate(self, value: Any, field: str, data: Mapping[str, Any]) -> bool:
        if isinstance(value, bool):
            return False
        if isinstance(value, int):
            return True
        if isinstance(value, str):
            return bool(self._pattern.match(value))
        return False


@dataclass
class Numeric(Rule):
    """Value must be numeric."""

    message: str = "The {field} must be a number"

    def validate(self, value: Any, field: str, data: Mapping[str, Any]) -> bool:
        if isinstance(value, bool):
            return False
        if isinstance(value, (int, float)):
            return True
        if isinstance(value, str):
            try:
                float(value)
                return True
            except ValueError:
                return False
        return False


@dataclass
class NaturalNumber(Rule):
    """Positive whole number (zero allowed on request)."""

    allow_zero: bool = False
    message: str = "The {field} must be a natural number"

    def validate(self, value: Any, field: str, data: Mapping[str, Any]) -> bool:
        if not Integer().validate(value, field, data):
            return False
        number = int(value)
        return number >= 0 if self.allow_zero else number > 0


@dataclass
class Range(Rule):
    """Numeric value within an inclusive range."""

    lower: Union[int, float]
    upper: Union[int, float]
    message: str = "The {field} must be between {min} and {max}"

    def __post_init__(self):
        _check_number("lower", self.lower)
        _check_number("upper", self.upper)

    def validate(self, value: Any, field: str, data: Mapping[str, Any]) -> bool:
        if not Numeric().validate(value, field, data):
            return False
        return self.lower <= float(value) <= self.upper

    def get_message(self, field: str, **params: Any) -> str:
        return self.message.format(field=field, min=self.lower, max=self.upper)


_COMPARISONS: Dict[str, Callable[[Any, Any], bool]] = {
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
    "==": operator.eq,
    "!=": operator.ne,
}


@dataclass
class Comparison(Rule):
    """Numeric comparison against a fixed value, e.g. ``[">=", 18]``."""

    operator: str
    value: Union[int, float]
    message: str = "The {field} must be {operator} {value}"

    def __post_init__(self):
        if not isinstance(self.operator, str) or self.operator not in _COMPARISONS:
            raise ValueError(f"Unsupported comparison operator: {self.operator!r}")
        _check_number("value", self.value)

    def validate(self, value: Any, field: str, data: Mapping[str, Any]) -> bool:
        if not Numeric().validate(value, field, data):
            return False
        return _COMPARISONS[self.operator](float(value), self.value)

    def get_message(self, field: str, **params: Any) -> str:
        return self.message.format(field=field, operator=self.operator, value=self.value)


@dataclass
class Email(Rule):
    """Validate email format."""

    message: str = "The {field} must be a valid email address"

    _pattern: ClassVar[Pattern] = re.compile(
        r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
    )

    def validate(self, value: Any, field: str, data: Mapping[str, Any]) -> bool:
        if not isinstance(value, str):
            return False
        return bool(self._pattern.match(value))


@dataclass
class Url(Rule):
    """Validate URL format."""

    message: str = "The {field} must be a valid URL"

    _pattern: ClassVar[Pattern] = re.compile(
        r"^https?://"
        r"(?:(?:[A-Z0-9](?:[A-Z0-9-]{0,61}[A-Z0-9])?\.)+[A-Z]{2,6}\.?|"
        r"localhost|"
        r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})"
        r"(?::\d+)?"
        r"(?:/?|[/?]\S+)$",
        re.IGNORECASE,
    )

    def validate(self, value: Any, field: str, data: Mapping[str, Any]) -> bool:
        if not isinstance(value, str):
            return False
        return bool(self._pattern.match(value))


@dataclass
class InList(Rule):
    """Value must be one of the allowed values."""

    allowed: List[Any] = dataclass_field(default_factory=list)
    message: str = "The selected {field} is invalid"

    def validate(self, value: Any, field: str, data: Mapping[str, Any]) -> bool:
        return value in self.allowed


@dataclass
class Regex(Rule):
    """Value must contain a match for the pattern."""

    pattern: Union[str, Pattern]
    message: str = "The {field} format is invalid"

    def __post_init__(self):
        if isinstance(self.pattern, str):
            try:
                self.pattern = re.compile(self.pattern)
            except re.error as e:
                raise ValueError(f"Invalid pattern: {e}") from e

    def validate(self, value: Any, field: str, data: Mapping[str, Any]) -> bool:
        if not isinstance(value, (str, int, float)) or isinstance(value, bool):
            return False
        return bool(self.pattern.search(str(value)))


@dataclass
class Alpha(Rule):
    """Value must contain only letters."""

    message: str = "The {field} must only contain letters"

    def validate(self, value: Any, field: str, data: Mapping[str, Any]) -> bool:
        if not isinstance(value, str):
            return False
        return value.isalpha()


@dataclass
class AlphaNumeric(Rule):
    """Value must contain only letters and numbers."""

    message: str = "The {field} must only contain letters and numbers"

    def validate(self, value: Any, field: str, data: Mapping[str, Any]) -> bool:
        if isinstance(value, int) and not isinstance(value, bool):
            return True
        if not isinstance(value, str):
            return False
        return value.isalnum()


@dataclass
class Date(Rule):
    """Value must be a valid date."""

    format: str = "%Y-%m-%d"
    message: str = "The {field} is not a valid date"

    def validate(self, value: Any, field: str, data: Mapping[str, Any]) -> bool:
        if isinstance(value, date):
            return True
        if isinstance(value, str):
            try:
                datetime.strptime(value, self.format)
                return True
            except ValueError:
                return False
        return False


@dataclass
class DateTime(Rule):
    """Value must be a valid datetime."""

    format: str = "%Y-%m-%d %H:%M:%S"
    message: str = "The {field} is not a valid datetime"

    def validate(self, value: Any, field: str, data: Mapping[str, Any]) -> bool:
        if isinstance(value, datetime):
            return True
        if isinstance(value, str):
            try:
                datetime.strptime(value, self.format)
                return True
            except ValueError:
                return False
        return False


@dataclass
class Uuid(Rule):
    """Value must be a valid UUID."""

    version: Optional[int] = None
    message: str = "The {field} must be a valid UUID"

    def validate(self, value: Any, field: str, data: Mapping[str, Any]) -> bool:
        try:
            parsed = uuid_module.UUID(str(value))
        except (ValueError, AttributeError):
            return False
        if self.version:
            return parsed.version == self.version
        return True


@dataclass
class Json(Rule):
    """Value must be valid JSON."""

    message: str = "The {field} must be valid JSON"

    def validate(self, value: Any, field: str, data: Mapping[str, Any]) -> bool:
        if isinstance(value, (dict, list)):
            return True
        if isinstance(value, str):
            try:
                json.loads(value)
                return True
            except json.JSONDecodeError:
                return False
        return False


@dataclass
class IsArray(Rule):
    """Value must be a list."""

    message: str = "The {field} must be an array"

    def validate(self, value: Any, field: str, data: Mapping[str, Any]) -> bool:
        return isinstance(value, (list, tuple))


@dataclass
class Boolean(Rule):
    """Value must be a boolean or a boolean-like scalar."""

    message: str = "The {field} must be true or false"

    def validate(self, value: Any, field: str, data: Mapping[str, Any]) -> bool:
        return value in (True, False, 1, 0, "1", "0", "true", "false")


@dataclass
class Equals(Rule):
    """Value must equal a fixed value."""

    expected: Any
    message: str = "The {field} must be {expected}"

    def validate(self, value: Any, field: str, data: Mapping[str, Any]) -> bool:
        return value == self.expected

    def get_message(self, field: str, **params: Any) -> str:
        return self.message.format(field=field, expected=self.expected)


@dataclass
class NotBlank(Rule):
    """String must contain a non-whitespace character."""

    message: str = "The {field} must not be blank"

    def validate(self, value: Any, field: str, data: Mapping[str, Any]) -> bool:
        if isinstance(value, str):
            return value.strip() != ""
        return value is not None


def _in_list(*allowed: Any) -> InList:
    # Accept both ``option: [["a", "b"]]`` and ``option: ["a", "b"]``
    if len(allowed) == 1 and isinstance(allowed[0], (list, tuple, set, frozenset)):
        return InList(allowed=list(allowed[0]))
    return InList(allowed=list(allowed))


class RuleRegistry:
    """
    Maps rule names to rule factories.

    A factory is called with the rule's ``option`` arguments and returns
    a `Rule`. Rule classes are valid factories.

    Example:
        registry = RuleRegistry()
        registry.register("maxLength", MaxLength)
        registry.register_check("isEven", lambda value: int(value) % 2 == 0)
    """

    def __init__(self, factories: Optional[Mapping[str, RuleFactory]] = None) -> None:
        self._factories: Dict[str, RuleFactory] = dict(factories or {})

    def register(self, name: str, factory: RuleFactory) -> "RuleRegistry":
        """Register a rule factory (or `Rule` subclass) under a name."""
        if not name or not isinstance(name, str):
            raise ConfigurationError(f"Invalid rule name: {name!r}")
        if name == "require":
            raise ConfigurationError("'require' is handled by the compiler and cannot be registered")
        self._factories[name] = factory
        return self

    def register_check(self, name: str, func: CheckFunction) -> "RuleRegistry":
        """Register a plain ``(value, *args) -> bool`` function."""

        def factory(*args: Any) -> Rule:
            return CallableRule(func=func, args=args, name=name)

        return self.register(name, factory)

    def check(self, name: str) -> Callable[[CheckFunction], CheckFunction]:
        """Decorator form of `register_check`."""

        def decorator(func: CheckFunction) -> CheckFunction:
            self.register_check(name, func)
            return func

        return decorator

    def create(self, name: str, args: Sequence[Any] = ()) -> Rule:
        """
        Build the rule instance for a name and its arguments.

        Raises:
            ConfigurationError: Unknown name or arguments the rule rejects
        """
        factory = self._factories.get(name)
        if factory is None:
            raise ConfigurationError(f"Unknown rule '{name}'")

        try:
            rule = factory(*args)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid option for rule '{name}': {e}") from e

        if not isinstance(rule, Rule):
            raise ConfigurationError(f"Factory for rule '{name}' did not return a Rule")
        if not isinstance(rule.message, str):
            # An extra option value landed in the message slot
            raise ConfigurationError(f"Invalid option for rule '{name}': too many arguments")
        return rule

    def names(self) -> List[str]:
        return sorted(self._factories)

    def copy(self) -> "RuleRegistry":
        return RuleRegistry(self._factories)

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._factories)


BUILTIN_RULES: Dict[str, RuleFactory] = {
    "maxLength": MaxLength,
    "minLength": MinLength,
    "lengthBetween": LengthBetween,
    "isInteger": Integer,
    "numeric": Numeric,
    "naturalNumber": NaturalNumber,
    "range": Range,
    "comparison": Comparison,
    "email": Email,
    "url": Url,
    "inList": _in_list,
    "custom": Regex,
    "alphaNumeric": AlphaNumeric,
    "alpha": Alpha,
    "date": Date,
    "datetime": DateTime,
    "uuid": Uuid,
    "json": Json,
    "isArray": IsArray,
    "boolean": Boolean,
    "equals": Equals,
    "notBlank": NotBlank,
}


def default_registry() -> RuleRegistry:
    """Fresh registry holding the built-in rules."""
    return RuleRegistry(BUILTIN_RULES)

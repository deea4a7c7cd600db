"""
Request Validator Conditions
============================

Resolves the ``when`` setting that gates whether a check runs.

Supported shapes:
- absent (``None``): always run
- ``True`` / ``False``: run or skip, verbatim
- callable: ``predicate(record) -> bool``, evaluated on every run

Anything else is rejected while compiling.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union

from request_validator.validation.exceptions import ConfigurationError

Predicate = Callable[[Mapping[str, Any]], Any]
When = Union[None, bool, Predicate]


@dataclass(frozen=True)
class Condition:
    """
    Compiled ``when`` gate.

    Attributes:
        static: Result when no predicate is set
        predicate: Dynamic gate over the record being validated
    """

    static: bool = True
    predicate: Optional[Predicate] = None

    @classmethod
    def from_when(cls, when: When) -> "Condition":
        """
        Compile a ``when`` setting.

        Raises:
            ConfigurationError: Unsupported ``when`` shape
        """
        if when is None:
            return ALWAYS
        if isinstance(when, bool):
            return ALWAYS if when else NEVER
        if callable(when):
            return cls(predicate=when)
        raise ConfigurationError(
            f"Unsupported 'when' value {when!r}: expected a bool or a callable"
        )

    @property
    def is_dynamic(self) -> bool:
        return self.predicate is not None

    def should_run(self, record: Mapping[str, Any]) -> bool:
        if self.predicate is None:
            return self.static
        return bool(self.predicate(record))


ALWAYS = Condition(static=True)
NEVER = Condition(static=False)


def should_run(when: When, record: Mapping[str, Any]) -> bool:
    """
    Resolve a raw ``when`` setting against a record.

    Example:
        >>> should_run(lambda data: data.get("type") == "corporate", {"type": "corporate"})
        True
    """
    return Condition.from_when(when).should_run(record)

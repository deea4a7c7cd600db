"""Tests for built-in rules and the rule registry."""

from __future__ import annotations

from datetime import date

import pytest

from request_validator.validation.exceptions import ConfigurationError
from request_validator.validation.rules import (
    CallableRule,
    InList,
    Rule,
    RuleRegistry,
    default_registry,
    is_empty,
)


def check(name, value, *args):
    return default_registry().create(name, args).validate(value, "field", {})


class TestIsEmpty:
    @pytest.mark.parametrize("value", [None, "", [], (), {}, set()])
    def test_empty(self, value) -> None:
        assert is_empty(value)

    @pytest.mark.parametrize("value", [0, 0.0, False, " ", "0", [None], {"a": None}])
    def test_not_empty(self, value) -> None:
        assert not is_empty(value)


class TestBuiltinRules:
    @pytest.mark.parametrize(
        "name, value, args, expected",
        [
            ("maxLength", "abc", (3,), True),
            ("maxLength", "abcd", (3,), False),
            ("maxLength", 123, (3,), False),
            ("minLength", "abc", (3,), True),
            ("minLength", "ab", (3,), False),
            ("lengthBetween", "hello", (5, 10), True),
            ("lengthBetween", "hi", (5, 10), False),
            ("lengthBetween", "x" * 11, (5, 10), False),
            ("isInteger", 5, (), True),
            ("isInteger", "-12", (), True),
            ("isInteger", "1.5", (), False),
            ("isInteger", True, (), False),
            ("isInteger", "hoge", (), False),
            ("numeric", "1.5", (), True),
            ("numeric", "abc", (), False),
            ("naturalNumber", "3", (), True),
            ("naturalNumber", 0, (), False),
            ("naturalNumber", 0, (True,), True),
            ("range", 5, (1, 10), True),
            ("range", "11", (1, 10), False),
            ("comparison", 18, (">=", 18), True),
            ("comparison", 17, (">=", 18), False),
            ("email", "user@example.com", (), True),
            ("email", "user@", (), False),
            ("url", "https://example.com/path", (), True),
            ("url", "example", (), False),
            ("custom", "AB-123", (r"^[A-Z]{2}-\d+$",), True),
            ("custom", "ab-123", (r"^[A-Z]{2}-\d+$",), False),
            ("alpha", "abc", (), True),
            ("alpha", "abc1", (), False),
            ("alphaNumeric", "abc1", (), True),
            ("alphaNumeric", "abc-1", (), False),
            ("date", "2024-02-29", (), True),
            ("date", "2023-02-29", (), False),
            ("date", date(2024, 1, 1), (), True),
            ("datetime", "2024-01-01 10:00:00", (), True),
            ("uuid", "12345678-1234-5678-1234-567812345678", (), True),
            ("uuid", "not-a-uuid", (), False),
            ("json", '{"a": 1}', (), True),
            ("json", "{a: 1}", (), False),
            ("isArray", [1], (), True),
            ("isArray", "1", (), False),
            ("boolean", "true", (), True),
            ("boolean", "maybe", (), False),
            ("equals", "yes", ("yes",), True),
            ("equals", "no", ("yes",), False),
            ("notBlank", "  ", (), False),
            ("notBlank", " a ", (), True),
        ],
    )
    def test_rule(self, name, value, args, expected) -> None:
        assert check(name, value, *args) is expected

    def test_in_list_accepts_list_option(self) -> None:
        assert check("inList", "b", ["a", "b"])
        assert not check("inList", "c", ["a", "b"])

    def test_in_list_accepts_splatted_option(self) -> None:
        assert check("inList", "b", "a", "b")
        assert default_registry().create("inList", ("a", "b")) == InList(allowed=["a", "b"])

    def test_default_messages(self) -> None:
        registry = default_registry()
        assert registry.create("lengthBetween", (5, 10)).get_message("name") == (
            "The name must be between 5 and 10 characters"
        )
        assert registry.create("isInteger").get_message("age") == "The age must be an integer"


class TestRuleRegistry:
    def test_unknown_rule(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown rule 'nope'"):
            default_registry().create("nope")

    def test_bad_arguments(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid option for rule 'lengthBetween'"):
            default_registry().create("lengthBetween", (5,))

    def test_register_rule_class(self) -> None:
        class Positive(Rule):
            def validate(self, value, field, data) -> bool:
                return value > 0

        registry = RuleRegistry().register("positive", Positive)
        assert "positive" in registry
        assert registry.create("positive").validate(1, "n", {})

    def test_register_check_function(self) -> None:
        registry = RuleRegistry()
        registry.register_check("divisibleBy", lambda value, n: value % n == 0)

        rule = registry.create("divisibleBy", (3,))
        assert isinstance(rule, CallableRule)
        assert rule.validate(9, "n", {})
        assert not rule.validate(10, "n", {})

    def test_check_decorator_returns_function(self) -> None:
        registry = RuleRegistry()

        @registry.check("isEven")
        def is_even(value):
            return value % 2 == 0

        assert is_even(2)
        assert registry.names() == ["isEven"]

    def test_failing_check_function_counts_as_invalid(self) -> None:
        registry = RuleRegistry().register_check("isEven", lambda value: int(value) % 2 == 0)
        assert registry.create("isEven").validate("abc", "n", {}) is False

    def test_factory_must_return_rule(self) -> None:
        registry = RuleRegistry().register("broken", lambda: True)
        with pytest.raises(ConfigurationError, match="did not return a Rule"):
            registry.create("broken")

    def test_require_is_reserved(self) -> None:
        with pytest.raises(ConfigurationError):
            RuleRegistry().register("require", InList)

    def test_default_registries_are_independent(self) -> None:
        first = default_registry()
        first.register_check("extra", lambda value: True)
        assert "extra" not in default_registry()

    def test_copy(self) -> None:
        registry = default_registry()
        copied = registry.copy()
        copied.register_check("extra", lambda value: True)
        assert "extra" in copied
        assert "extra" not in registry
        assert len(copied) == len(registry) + 1

    def test_builtin_names(self) -> None:
        names = default_registry().names()
        for name in ["maxLength", "minLength", "lengthBetween", "isInteger", "inList", "custom"]:
            assert name in names

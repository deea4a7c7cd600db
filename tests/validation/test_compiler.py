"""Tests for compiling rule settings into a validator graph."""

from __future__ import annotations

import copy

import pytest

from request_validator.validation.compiler import RuleCompiler, option_arguments
from request_validator.validation.conditions import ALWAYS, NEVER
from request_validator.validation.exceptions import ConfigurationError
from request_validator.validation.rules import LengthBetween, MaxLength, RuleRegistry, default_registry


@pytest.fixture
def compiler() -> RuleCompiler:
    return RuleCompiler()


class TestOptionArguments:
    def test_absent(self) -> None:
        assert option_arguments(None) == ()

    def test_scalar(self) -> None:
        assert option_arguments(20) == (20,)

    def test_list_is_splatted(self) -> None:
        assert option_arguments([5, 10]) == (5, 10)

    def test_falsy_scalar_is_kept(self) -> None:
        assert option_arguments(0) == (0,)
        assert option_arguments("") == ("",)

    def test_empty_list_gives_no_arguments(self) -> None:
        assert option_arguments([]) == ()

    def test_zero_option_reaches_the_rule(self, compiler) -> None:
        validator = compiler.compile({"n": {"rules": {"maxLength": {"option": 0, "message": "must be empty"}}}})
        rule = validator.get("n").checks[0].rule
        assert rule == MaxLength(length=0)


class TestFlatFields:
    def test_generic_rule(self, compiler, name_settings) -> None:
        validator = compiler.compile(name_settings)

        assert validator.field_names() == ["name"]
        plan = validator.get("name")
        assert not plan.is_nested
        assert len(plan.checks) == 1

        check = plan.checks[0]
        assert check.name == "name.maxLength"
        assert check.rule_name == "maxLength"
        assert check.rule == MaxLength(length=20)
        assert check.message == "Name must be 20 characters or less"
        assert check.when is ALWAYS

    def test_list_option_becomes_arguments(self, compiler) -> None:
        validator = compiler.compile({
            "between": {"rules": {"lengthBetween": {"option": [5, 10], "message": "5 to 10"}}},
        })
        rule = validator.get("between").checks[0].rule
        assert rule == LengthBetween(min_length=5, max_length=10)

    def test_field_order_is_kept(self, compiler) -> None:
        settings = {
            name: {"rules": {"require": {"message": f"{name} required"}}}
            for name in ["zeta", "alpha", "mid"]
        }
        assert compiler.compile(settings).field_names() == ["zeta", "alpha", "mid"]

    def test_missing_message_uses_rule_default(self, compiler) -> None:
        validator = compiler.compile({
            "title": {"rules": {"require": {}, "maxLength": {"option": 5}}},
        })
        plan = validator.get("title")
        assert plan.presence_message == "The title field is required"
        assert plan.checks[0].message == "The title must not exceed 5 characters"

    def test_generic_when_applied_verbatim(self, compiler) -> None:
        def predicate(data):
            return True

        validator = compiler.compile({
            "a": {"rules": {"isInteger": {"message": "int", "when": False}}},
            "b": {"rules": {"isInteger": {"message": "int", "when": predicate}}},
        })
        assert validator.get("a").checks[0].when is NEVER
        assert validator.get("b").checks[0].when.predicate is predicate

    def test_no_require_means_optional(self, compiler) -> None:
        plan = compiler.compile({"note": {"rules": {"maxLength": {"option": 3, "message": "x"}}}}).get("note")
        assert plan.presence is NEVER
        assert plan.not_empty is NEVER


class TestRequire:
    def _plan(self, compiler, **spec):
        return compiler.compile({
            "name": {"rules": {"require": {"message": "Name is required", **spec}}},
        }).get("name")

    def test_default_requires_presence_and_value(self, compiler) -> None:
        plan = self._plan(compiler)
        assert plan.presence is ALWAYS
        assert plan.not_empty is ALWAYS
        assert plan.checks == ()

    def test_static_true_requires_presence_and_value(self, compiler) -> None:
        plan = self._plan(compiler, when=True)
        assert plan.presence is ALWAYS
        assert plan.not_empty is ALWAYS

    def test_static_false_requires_non_empty_only(self, compiler) -> None:
        plan = self._plan(compiler, when=False)
        assert plan.presence is NEVER
        assert plan.not_empty is ALWAYS

    def test_predicate_gates_both_checks(self, compiler) -> None:
        def predicate(data):
            return data.get("type") == "corporate"

        plan = self._plan(compiler, when=predicate)
        assert plan.presence.predicate is predicate
        assert plan.not_empty.predicate is predicate

    def test_messages(self, compiler) -> None:
        plan = self._plan(compiler)
        assert plan.presence_message == "Name is required"
        assert plan.empty_message == "Name is required"


class TestNestedGroups:
    def test_group_compiles_to_child_validator(self, compiler, children_settings) -> None:
        validator = compiler.compile(children_settings)

        plan = validator.get("add_children")
        assert plan.is_nested
        assert plan.checks == ()
        assert plan.nested.field_names() == ["sex", "birthday"]
        assert plan.nested.get("sex").checks[0].name == "sex.isInteger"

    def test_group_with_option_lists(self, compiler) -> None:
        validator = compiler.compile({
            "add_children": {
                "name": {"rules": {"lengthBetween": {"option": [5, 10], "message": "5 to 10"}}},
            },
        })
        assert validator.get("add_children").is_nested

    def test_group_of_rules_without_messages(self, compiler) -> None:
        validator = compiler.compile({"children": {"age": {"rules": {"isInteger": {}}}}})

        plan = validator.get("children")
        assert plan.is_nested
        check = plan.nested.get("age").checks[0]
        assert check.name == "age.isInteger"
        assert check.message == "The age must be an integer"

    def test_groups_can_nest(self, compiler) -> None:
        validator = compiler.compile({
            "orders": {
                "items": {
                    "sku": {"rules": {"require": {"message": "sku required"}}},
                },
            },
        })
        items = validator.get("orders").nested.get("items")
        assert items.is_nested
        assert items.nested.field_names() == ["sku"]

    def test_mixed_flat_and_nested(self, compiler, name_settings, children_settings) -> None:
        validator = compiler.compile({**name_settings, **children_settings})
        assert [plan.is_nested for plan in validator] == [False, True]


class TestCompileOnce:
    def test_settings_are_not_mutated(self, compiler, children_settings) -> None:
        original = copy.deepcopy(children_settings)
        compiler.compile(children_settings)
        assert children_settings == original

    def test_custom_registry(self) -> None:
        registry = default_registry()
        registry.register_check("isEven", lambda value: int(value) % 2 == 0)
        validator = RuleCompiler(registry).compile({"n": {"rules": {"isEven": {"message": "even"}}}})
        assert validator.get("n").checks[0].rule.validate("4", "n", {})


class TestConfigurationErrors:
    @pytest.mark.parametrize(
        "settings, fragment",
        [
            ({"name": {"require": {"message": "x"}}}, "Missing 'rules'"),
            ({"name": {"rules": {"noSuchRule": {"message": "x"}}}}, "Unknown rule 'noSuchRule'"),
            ({"name": {"rules": {"require": {"message": "x", "when": "always"}}}}, "Unsupported 'when'"),
            ({"name": {"rules": {"isInteger": {"message": "x", "when": 1}}}}, "Unsupported 'when'"),
            ({"name": {"rules": ["require"]}}, "must be a mapping"),
            ({"name": {"rules": {"require": "required"}}}, "must be a mapping"),
            ({"name": {"rules": {"require": {"msg": "x"}}}}, "Unknown rule setting"),
            ({"name": {"rules": {"require": {"message": 42}}}}, "'message' must be a string"),
            ({"name": {"rules": {"maxLength": {"option": [1, 2, 3], "message": "x"}}}}, "Invalid option"),
            ({"name": {"rules": {"comparison": {"option": ["~", 1], "message": "x"}}}}, "Invalid option"),
            ({"name": {"rules": {"maxLength": {"option": [20, 30], "message": "x"}}}}, "too many arguments"),
            ({"user.name": {"rules": {}}}, "must not contain '.'"),
            ({"": {"rules": {}}}, "non-empty strings"),
            ({"name": "required"}, "must be a mapping"),
        ],
    )
    def test_rejected(self, compiler, settings, fragment) -> None:
        with pytest.raises(ConfigurationError, match=fragment.replace("(", r"\(").replace(".", r"\.")):
            compiler.compile(settings)

    @pytest.mark.parametrize(
        "rule_name, option",
        [
            ("maxLength", "20"),
            ("minLength", 2.5),
            ("maxLength", True),
            ("lengthBetween", ["5", 10]),
            ("lengthBetween", [5, None]),
            ("range", ["1", 10]),
            ("range", [1, "10"]),
            ("comparison", [">=", "18"]),
        ],
    )
    def test_non_numeric_options_fail_at_compile_time(self, compiler, rule_name, option) -> None:
        settings = {"name": {"rules": {rule_name: {"option": option, "message": "x"}}}}
        with pytest.raises(ConfigurationError, match=f"Invalid option for rule '{rule_name}'") as exc_info:
            compiler.compile(settings)
        assert exc_info.value.path == ("name", "rules", rule_name)

    def test_error_names_the_location(self, compiler) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            compiler.compile({"children": {"age": {"rules": {"nope": {"message": "x"}}}}})
        assert exc_info.value.path == ("children", "age", "rules", "nope")
        assert str(exc_info.value).startswith("children.age.rules.nope: ")

    def test_nested_field_named_option_is_reserved(self, compiler) -> None:
        with pytest.raises(ConfigurationError, match="reserved"):
            compiler.compile({
                "group": {
                    "option": {"rules": {"require": {"message": "x"}}},
                    "other": {"rules": {"require": {"message": "y"}}},
                },
            })

    def test_lone_option_child_is_reserved(self, compiler) -> None:
        with pytest.raises(ConfigurationError, match="reserved"):
            compiler.compile({"group": {"option": {"rules": {"require": {"message": "x"}}}}})

    def test_settings_must_be_a_mapping(self, compiler) -> None:
        with pytest.raises(ConfigurationError):
            compiler.compile([("name", {"rules": {}})])

    def test_empty_registry_rejects_builtin_names(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown rule"):
            RuleCompiler(RuleRegistry()).compile({"n": {"rules": {"isInteger": {"message": "x"}}}})

"""Tests for FieldValidator.execute()."""

import logging

import pytest

from fieldrules.config import EngineConfig
from fieldrules.engine import FieldValidator
from fieldrules.exceptions import UnknownRuleError
from fieldrules.types import Outcome, RuleInvocation


def required(value, params):
    return value is None or value == ""


def between(value, params):
    return not float(params[0]) <= float(value) <= float(params[1])


def always_fails(value, params):
    return True


def never_fails(value, params):
    return False


def recording(result):
    """Rule function that records its calls."""
    calls = []

    def rule(value, params):
        calls.append((value, params))
        return result

    rule.calls = calls
    return rule


@pytest.fixture
def validator():
    return FieldValidator(
        rules={"required": required, "between": between},
        messages={"required": "This field is required"},
    )


# =============================================================================
# Outcomes
# =============================================================================


class TestOutcomes:
    def test_all_valid(self, validator):
        result = validator.execute(
            {"name": "Ann", "age": 30},
            {"name": "required", "age": "required|between:18,99"},
        )
        assert result.status == Outcome.VALID
        assert result.valid
        assert len(result.errors) == 0

    def test_invalid(self, validator):
        result = validator.execute({"name": "", "age": 30}, {"name": "required", "age": "required"})
        assert result.status == Outcome.INVALID
        assert not result.valid
        assert result.errors.to_dict() == {"name": ["This field is required"]}

    def test_synthesized_default_message(self, validator):
        result = validator.execute({"age": 5}, {"age": "between:18,99"})
        assert result.errors.get("age") == ["between was undefined"]

    def test_list_expression(self, validator):
        result = validator.execute({"age": 5}, {"age": ["required", "between:18,99"]})
        assert result.errors.first("age") == "between was undefined"

    def test_no_rules(self, validator):
        result = validator.execute({"name": ""}, {})
        assert result.valid

    def test_fields_without_rules_are_ignored(self, validator):
        result = validator.execute({"name": "", "extra": ""}, {"name": "required"})
        assert result.errors.keys() == ["name"]

    def test_errors_follow_rule_map_order(self, validator):
        result = validator.execute(
            {"a": "", "b": ""},
            {"b": "required", "a": "required"},
        )
        assert result.errors.keys() == ["b", "a"]

    def test_to_dict(self, validator):
        result = validator.execute({"name": ""}, {"name": "required"})
        assert result.to_dict() == {
            "status": "invalid",
            "errors": {"name": ["This field is required"]},
        }


# =============================================================================
# Short-circuit and polarity
# =============================================================================


class TestShortCircuit:
    def test_first_violation_wins(self):
        second = recording(True)
        validator = FieldValidator(
            rules={"a": always_fails, "b": second},
            messages={"a": "A failed", "b": "B failed"},
        )
        result = validator.execute({"field": "x"}, {"field": "a|b"})
        assert result.errors.get("field") == ["A failed"]
        assert second.calls == []

    def test_later_rule_runs_when_earlier_passes(self):
        validator = FieldValidator(
            rules={"a": never_fails, "b": always_fails},
            messages={"a": "A failed", "b": "B failed"},
        )
        result = validator.execute({"field": "x"}, {"field": "a|b"})
        assert result.errors.get("field") == ["B failed"]

    def test_short_circuit_is_per_field(self):
        validator = FieldValidator(rules={"a": always_fails}, messages={"a": "A failed"})
        result = validator.execute({"one": 1, "two": 2}, {"one": "a", "two": "a"})
        assert result.errors.to_dict() == {"one": ["A failed"], "two": ["A failed"]}

    def test_truthy_return_is_violation(self):
        validator = FieldValidator(rules={"nonempty": lambda value, params: "bad"})
        result = validator.execute({"f": 1}, {"f": "nonempty"})
        assert not result.valid

    def test_falsy_return_passes(self):
        validator = FieldValidator(rules={"empty": lambda value, params: None})
        result = validator.execute({"f": 1}, {"f": "empty"})
        assert result.valid

    def test_validator_receives_value_and_params(self):
        rule = recording(False)
        validator = FieldValidator(rules={"between": rule})
        validator.execute({"age": 30}, {"age": "between:1,10"})
        assert rule.calls == [(30, ["1", "10"])]

    def test_validator_exceptions_propagate(self):
        def broken(value, params):
            raise RuntimeError("boom")

        validator = FieldValidator(rules={"broken": broken})
        with pytest.raises(RuntimeError, match="boom"):
            validator.execute({"f": 1}, {"f": "broken"})


# =============================================================================
# Messages
# =============================================================================


class TestMessages:
    def test_override_precedence(self):
        validator = FieldValidator(rules={"required": always_fails}, messages={"required": "req default"})
        result = validator.execute(
            {"age": ""},
            {"age": "required"},
            {"age": {"required": "age is required"}},
        )
        assert result.errors.get("age") == ["age is required"]

    def test_override_only_applies_to_its_field(self):
        validator = FieldValidator(rules={"required": always_fails}, messages={"required": "req default"})
        result = validator.execute(
            {"age": "", "name": ""},
            {"age": "required", "name": "required"},
            {"age": {"required": "age is required"}},
        )
        assert result.errors.get("name") == ["req default"]

    def test_message_factory(self):
        validator = FieldValidator(
            rules={"min": lambda value, params: value < float(params[0])},
            messages={"min": lambda value, params: f"{value} is below {params[0]}"},
        )
        result = validator.execute({"score": 5}, {"score": "min:10"})
        assert result.errors.get("score") == ["5 is below 10"]

    def test_override_factory(self):
        validator = FieldValidator(rules={"min": always_fails})
        result = validator.execute(
            {"score": 5},
            {"score": "min:10"},
            {"score": {"min": lambda value, params: f"need {params[0]}, got {value}"}},
        )
        assert result.errors.get("score") == ["need 10, got 5"]

    def test_add_rule_without_message_uses_default_template(self):
        validator = FieldValidator()
        validator.add_rule("strict", always_fails)
        result = validator.execute({"f": 1}, {"f": "strict"})
        assert result.errors.get("f") == ["strict was undefined"]

    def test_custom_default_template(self):
        validator = FieldValidator(config=EngineConfig(default_message="{rule}: invalid"))
        validator.add_rule("strict", always_fails)
        result = validator.execute({"f": 1}, {"f": "strict"})
        assert result.errors.get("f") == ["strict: invalid"]

    def test_add_rules_returns_resolved_messages(self):
        validator = FieldValidator()
        messages = {"a": "A failed"}
        resolved = validator.add_rules({"a": always_fails, "b": always_fails}, messages)
        assert resolved == {"a": "A failed", "b": "b was undefined"}
        assert messages == {"a": "A failed"}


# =============================================================================
# Missing targets
# =============================================================================


class TestMissingTarget:
    def test_missing_key_aborts(self, validator):
        result = validator.execute({}, {"age": "required"})
        assert result.status == Outcome.ABORTED
        assert result.aborted
        assert result.errors is None
        assert result.aborted_field == "age"

    def test_partial_results_are_discarded(self, validator):
        result = validator.execute(
            {"name": ""},
            {"name": "required", "age": "required", "email": "required"},
        )
        assert result.aborted
        assert result.errors is None
        assert result.to_dict() == {"status": "aborted", "abortedField": "age"}

    def test_valid_fields_do_not_hide_abort(self, validator):
        result = validator.execute({"name": "Ann"}, {"name": "required", "age": "required"})
        assert result.aborted
        assert not result.valid

    def test_false_is_treated_as_missing(self, validator):
        result = validator.execute({"agree": False}, {"agree": "required"})
        assert result.aborted
        assert result.aborted_field == "agree"

    def test_false_allowed_when_configured(self):
        validator = FieldValidator(
            rules={"required": required},
            config=EngineConfig(false_is_missing=False),
        )
        result = validator.execute({"agree": False}, {"agree": "required"})
        assert result.valid

    def test_none_and_falsy_values_are_targets(self, validator):
        result = validator.execute(
            {"a": None, "b": 0, "c": ""},
            {"a": "required", "b": "required", "c": "required"},
        )
        assert result.status == Outcome.INVALID
        assert result.errors.keys() == ["a", "c"]

    def test_abort_is_logged(self, validator, caplog):
        with caplog.at_level(logging.WARNING, logger="fieldrules.engine"):
            validator.execute({}, {"age": "required"})
        assert "Missing validation target 'age'" in caplog.text

    def test_engine_usable_after_abort(self, validator):
        validator.execute({}, {"age": "required"})
        result = validator.execute({"age": 20}, {"age": "required"})
        assert result.valid


# =============================================================================
# Unknown rules
# =============================================================================


class TestUnknownRule:
    def test_reported_as_diagnostic(self, validator):
        result = validator.execute({"name": "Ann"}, {"name": "required|nope"})
        assert result.status == Outcome.INVALID
        assert result.errors.get("name") == ["no validator registered for rule 'nope'"]

    def test_short_circuits_later_rules(self):
        later = recording(False)
        validator = FieldValidator(rules={"later": later})
        validator.execute({"f": 1}, {"f": "nope|later"})
        assert later.calls == []

    def test_override_message_is_used(self, validator):
        result = validator.execute(
            {"name": "Ann"},
            {"name": "nope"},
            {"name": {"nope": "custom"}},
        )
        assert result.errors.get("name") == ["custom"]

    def test_raise_policy(self):
        validator = FieldValidator(config=EngineConfig(unknown_rule="raise"))
        with pytest.raises(UnknownRuleError) as exc_info:
            validator.execute({"name": "Ann"}, {"name": "nope"})
        assert exc_info.value.rule == "nope"
        assert exc_info.value.field == "name"

    def test_is_logged(self, validator, caplog):
        with caplog.at_level(logging.WARNING, logger="fieldrules.engine"):
            validator.execute({"name": "Ann"}, {"name": "nope"})
        assert "No validator registered for rule 'nope'" in caplog.text


# =============================================================================
# Preparers
# =============================================================================


class TestPreparers:
    def test_preparer_rewrites_params(self):
        seen = []

        def matches(value, params):
            seen.append(params)
            return value != params[0]

        def prepare(values, key, tokens):
            return [tokens[0], values["confirm_" + key]]

        validator = FieldValidator(
            rules={"matches": (matches, prepare)},
            messages={"matches": "does not match"},
        )
        ok = validator.execute(
            {"password": "s3cret", "confirm_password": "s3cret"},
            {"password": "matches"},
        )
        bad = validator.execute(
            {"password": "s3cret", "confirm_password": "other"},
            {"password": "matches:ignored"},
        )
        assert ok.valid
        assert bad.errors.get("password") == ["does not match"]
        assert seen == [["s3cret"], ["other"]]

    def test_calls_are_independent(self):
        def prepare(values, key, tokens):
            return [tokens[0], str(values["limit"])]

        validator = FieldValidator(
            rules={"max": (lambda value, params: value > int(params[0]), prepare)},
        )
        first = validator.execute({"n": 5, "limit": 10}, {"n": "max"})
        second = validator.execute({"n": 5, "limit": 3}, {"n": "max"})
        assert first.valid
        assert not second.valid


class TestCheckHelpers:
    def test_check_rule(self, validator):
        violation = validator.check_rule("", RuleInvocation("required"))
        assert violation is not None
        assert violation.name == "required"
        assert violation.value == ""
        assert not violation.unknown

    def test_check_rule_passes(self, validator):
        assert validator.check_rule("x", RuleInvocation("required")) is None

    def test_check_rule_unknown(self, validator):
        assert validator.check_rule("x", RuleInvocation("nope")).unknown

    def test_check_field(self, validator):
        violation = validator.check_field(
            [RuleInvocation("required"), RuleInvocation("between", ["1", "10"])],
            50,
        )
        assert violation.invocation == RuleInvocation("between", ["1", "10"])

    def test_rule_object(self):
        class Even:
            def evaluate(self, value, params):
                return value % 2 == 1

        validator = FieldValidator(rules={"even": Even()}, messages={"even": "must be even"})
        result = validator.execute({"n": 3}, {"n": "even"})
        assert result.errors.get("n") == ["must be even"]

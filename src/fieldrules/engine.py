"""Validation executor for fieldrules.

FieldValidator ties the registry, parser and message resolver together:

    validator = FieldValidator(
        rules={"required": lambda value, params: value in (None, "")},
        messages={"required": "This field is required"},
    )
    result = validator.execute(
        {"email": "", "name": "Ann"},
        {"email": "required|email", "name": ["required"]},
    )
    result.errors.get("email")  # ["This field is required"]

Rule functions return True when the value VIOLATES the rule. Fields are
checked in order and each field stops at its first violation, so a field
records at most one message per call.
"""

import logging
from typing import Any, Mapping

from fieldrules.collection import ErrorCollection
from fieldrules.config import EngineConfig
from fieldrules.exceptions import MissingTargetError, UnknownRuleError
from fieldrules.messages import MessageOverrides, MessageResolver
from fieldrules.parser import parse_field_rules
from fieldrules.registry import RuleRegistry
from fieldrules.types import (
    Outcome,
    RuleInvocation,
    RuleMessage,
    ValidationResult,
    Violation,
)

logger = logging.getLogger(__name__)

UNKNOWN_RULE_MESSAGE = "no validator registered for rule '{rule}'"

_MISSING = object()


class FieldValidator:
    """Validates field values against pipe-delimited rule expressions.

    The instance holds only the rule registry; everything derived from an
    execute() call (parsed rules, errors) stays local to that call.
    """

    def __init__(
        self,
        rules: Mapping[str, Any] | None = None,
        messages: Mapping[str, RuleMessage] | None = None,
        config: EngineConfig | None = None,
    ):
        self.config = config or EngineConfig()
        self.registry = RuleRegistry(self.config)
        self.resolver = MessageResolver(self.registry)
        if rules:
            self.add_rules(rules, messages)

    # =========================================================================
    # Registration
    # =========================================================================

    def add_rule(
        self,
        name: str,
        rule: Any,
        message: RuleMessage | None = None,
    ) -> None:
        """Add a rule.

        Args:
            name: Rule name as used in rule expressions
            rule: Rule function, (validator, preparer) pair, or Rule object
            message: Default message (string or factory); None means no message
        """
        self.registry.register(name, rule, message)

    def add_rules(
        self,
        rules: Mapping[str, Any],
        messages: Mapping[str, RuleMessage] | None = None,
    ) -> dict[str, RuleMessage]:
        """Add several rules, synthesizing "<name> was undefined" messages
        for rules without one.

        Returns:
            The resolved message map (the caller's map is not modified)
        """
        return self.registry.register_many(rules, messages)

    # =========================================================================
    # Execution
    # =========================================================================

    def execute(
        self,
        values: Mapping[str, Any],
        rules: Mapping[str, Any],
        messages: MessageOverrides | None = None,
    ) -> ValidationResult:
        """Validate values against per-field rule expressions.

        Args:
            values: Field name -> value
            rules: Field name -> rule expression ('a|b:1,2' or ['a', 'b:1,2'])
            messages: Optional {field: {rule: message}} overrides for this call

        Returns:
            ValidationResult. VALID or INVALID carry the error collection.
            ABORTED means a field in `rules` had no value (or was False);
            errors gathered before the abort are discarded.

        Raises:
            UnknownRuleError: If config.unknown_rule is "raise" and a rule
                expression names an unregistered rule
        """
        parsed = parse_field_rules(rules, values, self.registry)
        errors = ErrorCollection()

        try:
            for target, invocations in parsed.items():
                value = self._target_value(values, target)
                violation = self.check_field(invocations, value)
                if violation is None:
                    continue
                errors.add(target, self._message_for(violation, target, messages))
        except MissingTargetError as e:
            logger.warning("Validation aborted: %s", e)
            return ValidationResult(status=Outcome.ABORTED, aborted_field=e.field)

        status = Outcome.INVALID if len(errors) else Outcome.VALID
        return ValidationResult(status=status, errors=errors)

    def check_field(
        self,
        invocations: list[RuleInvocation],
        value: Any,
    ) -> Violation | None:
        """Run a field's rules in order and return the first violation."""
        for invocation in invocations:
            violation = self.check_rule(value, invocation)
            if violation is not None:
                return violation
        return None

    def check_rule(self, value: Any, invocation: RuleInvocation) -> Violation | None:
        """Run one rule against a value.

        An unregistered rule counts as a violation flagged `unknown`.
        """
        definition = self.registry.get(invocation.name)
        if definition is None:
            return Violation(invocation=invocation, value=value, unknown=True)
        if definition.evaluate(value, invocation.params):
            return Violation(invocation=invocation, value=value)
        return None

    # =========================================================================
    # Helpers
    # =========================================================================

    def _target_value(self, values: Mapping[str, Any], target: str) -> Any:
        value = values.get(target, _MISSING)
        if value is _MISSING or (self.config.false_is_missing and value is False):
            raise MissingTargetError(target)
        return value

    def _message_for(
        self,
        violation: Violation,
        target: str,
        overrides: MessageOverrides | None,
    ) -> str:
        name = violation.name
        params = violation.invocation.params

        if violation.unknown:
            logger.warning("No validator registered for rule '%s' on field '%s'", name, target)
            if self.config.unknown_rule == "raise":
                raise UnknownRuleError(name, target)
            template = self.resolver.override(name, target, overrides)
            if template is None:
                return UNKNOWN_RULE_MESSAGE.format(rule=name)
            return self.resolver.render(template, violation.value, params)

        logger.debug("Field '%s' failed rule '%s'", target, name)
        template = self.resolver.resolve(name, target, overrides)
        if template is None:
            template = self.config.format_default_message(name)
        return self.resolver.render(template, violation.value, params)

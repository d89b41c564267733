"""Rule registry for fieldrules.

Provides registration and lookup for:
- Rule functions (value, params) -> bool, where True means violation
- Preparers that rewrite a rule's raw tokens before params are parsed
- Default messages (plain strings or message factories)
"""

import logging
from typing import Any, Callable, Mapping

from fieldrules.config import EngineConfig
from fieldrules.exceptions import RuleSpecError
from fieldrules.types import (
    PrepareFunction,
    RuleDefinition,
    RuleFunction,
    RuleMessage,
)

logger = logging.getLogger(__name__)


def _split_rule_spec(
    name: str, rule_spec: Any
) -> tuple[RuleFunction, PrepareFunction | None]:
    """Extract (validator, preparer) from a rule spec.

    Accepts a rule function, a (validator, preparer) pair, or an object
    exposing evaluate() and optionally prepare().
    """
    if hasattr(rule_spec, "evaluate"):
        prepare = getattr(rule_spec, "prepare", None)
        return rule_spec.evaluate, prepare if callable(prepare) else None

    if callable(rule_spec):
        return rule_spec, None

    if isinstance(rule_spec, (list, tuple)) and rule_spec:
        validator = rule_spec[0]
        preparer = rule_spec[1] if len(rule_spec) > 1 else None
        if callable(validator):
            return validator, preparer if callable(preparer) else None

    raise RuleSpecError(
        f"Rule '{name}' must be a function, a (validator, preparer) pair, "
        f"or an object with evaluate(); got {type(rule_spec).__name__}"
    )


class RuleRegistry:
    """Registry for named rules.

    Each FieldValidator owns one registry. Registering a name that already
    exists replaces its validator and preparer; the previous default message
    is kept unless a new one is given.

    Example:
        registry = RuleRegistry()
        registry.register("required", lambda value, params: value in (None, ""))

        @registry.rule("min", message=lambda value, params: f"{value} is below {params[0]}")
        def below_min(value, params):
            return float(value) < float(params[0])
    """

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()
        self._rules: dict[str, RuleDefinition] = {}

    def register(
        self,
        name: str,
        rule_spec: Any,
        message: RuleMessage | None = None,
    ) -> RuleDefinition:
        """Register a rule by name.

        Args:
            name: Rule name as used in rule expressions
            rule_spec: Rule function, (validator, preparer) pair, or Rule object
            message: Default message; None leaves any earlier message in place

        Returns:
            The stored RuleDefinition

        Raises:
            RuleSpecError: If no validator can be taken from rule_spec
        """
        validator, preparer = _split_rule_spec(name, rule_spec)

        previous = self._rules.get(name)
        if message is None and previous is not None:
            message = previous.message

        definition = RuleDefinition(
            name=name,
            validate=validator,
            prepare=preparer,
            message=message,
        )
        if previous is not None:
            logger.debug("Rule '%s' re-registered, replacing previous validator", name)
        self._rules[name] = definition
        return definition

    def register_many(
        self,
        rules: Mapping[str, Any],
        messages: Mapping[str, RuleMessage] | None = None,
    ) -> dict[str, RuleMessage]:
        """Register several rules at once.

        Rules with no entry in `messages` get a synthesized default built from
        config.default_message. The caller's mapping is left untouched.

        Returns:
            The resolved message map, one entry per registered rule
        """
        messages = messages or {}
        resolved: dict[str, RuleMessage] = {}
        for name, rule_spec in rules.items():
            message = messages.get(name)
            if message is None:
                message = self.config.format_default_message(name)
            resolved[name] = message
            self.register(name, rule_spec, message)
        return resolved

    def rule(
        self,
        name: str,
        message: RuleMessage | None = None,
        prepare: PrepareFunction | None = None,
    ) -> Callable[[RuleFunction], RuleFunction]:
        """Decorator to register a rule function.

        Usage:
            @registry.rule("same", prepare=prepare_same)
            def same(value, params):
                return value != params[0]
        """

        def decorator(fn: RuleFunction) -> RuleFunction:
            spec = (fn, prepare) if prepare is not None else fn
            self.register(name, spec, message)
            return fn

        return decorator

    def get(self, name: str) -> RuleDefinition | None:
        """Get a registered rule, or None if the name is unknown."""
        return self._rules.get(name)

    def get_preparer(self, name: str) -> PrepareFunction | None:
        definition = self._rules.get(name)
        return definition.prepare if definition else None

    def get_message(self, name: str) -> RuleMessage | None:
        definition = self._rules.get(name)
        return definition.message if definition else None

    def is_registered(self, name: str) -> bool:
        """Check if a rule is registered."""
        return name in self._rules

    def list_registered(self) -> list[str]:
        """List all registered rule names."""
        return sorted(self._rules.keys())

    def clear(self) -> None:
        """Clear all registrations. Primarily for testing."""
        self._rules.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __len__(self) -> int:
        return len(self._rules)

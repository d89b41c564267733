"""Message resolution for rule violations.

A message is either a literal string or a factory called with
(value, params) for the failing rule. Call-time overrides, keyed by field
and then by rule name, take precedence over registry defaults.
"""

from typing import Any, Mapping

from fieldrules.registry import RuleRegistry
from fieldrules.types import RuleMessage

MessageOverrides = Mapping[str, Mapping[str, RuleMessage]]


class MessageResolver:
    """Looks up and renders the message for a failed rule."""

    def __init__(self, registry: RuleRegistry):
        self.registry = registry

    def override(
        self,
        rule: str,
        field: str,
        overrides: MessageOverrides | None = None,
    ) -> RuleMessage | None:
        """Return the call-time override for field/rule, if any."""
        if not overrides:
            return None
        field_messages = overrides.get(field)
        # a non-mapping entry for a field carries no per-rule overrides
        if not isinstance(field_messages, Mapping):
            return None
        return field_messages.get(rule)

    def resolve(
        self,
        rule: str,
        field: str,
        overrides: MessageOverrides | None = None,
    ) -> RuleMessage | None:
        """Resolve the message template for a failed rule.

        Args:
            rule: Name of the failed rule
            field: Field that failed it
            overrides: Optional {field: {rule: message}} map for this call

        Returns:
            The override if present, otherwise the registry default
            (None if the rule has no message at all)
        """
        message = self.override(rule, field, overrides)
        if message is not None:
            return message
        return self.registry.get_message(rule)

    @staticmethod
    def render(
        template: RuleMessage,
        value: Any,
        params: list[str] | None,
    ) -> str:
        """Turn a template into the final message string."""
        if callable(template):
            return template(value, params)
        return template

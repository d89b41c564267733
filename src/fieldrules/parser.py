"""Rule expression parser.

Turns a field's rule expression into an ordered list of RuleInvocations:

    'required|between:1,10'  -> [RuleInvocation('required', None),
                                 RuleInvocation('between', ['1', '10'])]
    ['required', 'email']    -> [RuleInvocation('required', None),
                                 RuleInvocation('email', None)]

Grammar:
    expression := token ('|' token)*
    token      := name (':' param (',' param)*)?

If a preparer is registered for a rule, it sees the raw [name, params]
parts together with every field value and may rewrite the params before
they are split. The invocation keeps the name from the original token.
"""

from typing import Any, Mapping

from fieldrules.exceptions import RuleExpressionError
from fieldrules.registry import RuleRegistry
from fieldrules.types import RuleInvocation

RULE_SEPARATOR = "|"
NAME_SEPARATOR = ":"
PARAM_SEPARATOR = ","


def split_expression(expression: Any) -> list[str]:
    """Split a rule expression into raw tokens.

    Strings are split on '|'; lists and tuples are taken as already split.

    Raises:
        RuleExpressionError: For any other type
    """
    if isinstance(expression, str):
        return expression.split(RULE_SEPARATOR)
    if isinstance(expression, (list, tuple)):
        return list(expression)
    raise RuleExpressionError(
        f"Rule expression must be a string or a list of tokens, "
        f"got {type(expression).__name__}"
    )


def _split_params(raw: Any) -> list[str] | None:
    if raw is None:
        return None
    if isinstance(raw, str):
        return raw.split(PARAM_SEPARATOR)
    if isinstance(raw, (list, tuple)):
        return [str(item) for item in raw] or None
    return [str(raw)]


def parse_token(
    token: str,
    key: str,
    values: Mapping[str, Any],
    registry: RuleRegistry,
) -> RuleInvocation:
    """Parse a single rule token for a field.

    Args:
        token: Raw token, e.g. 'between:1,10'
        key: Field the token belongs to (passed to preparers)
        values: All field values for the current call (passed to preparers)
        registry: Registry used to look up preparers

    Returns:
        The parsed RuleInvocation
    """
    parts: list[Any] = str(token).split(NAME_SEPARATOR, 1)
    name = parts[0]

    definition = registry.get(name)
    if definition is not None and definition.prepare is not None:
        tokens = [name, parts[1] if len(parts) > 1 else None]
        parts = definition.prepare_tokens(values, key, tokens)

    raw_params = parts[1] if len(parts) > 1 else None
    return RuleInvocation(name=name, params=_split_params(raw_params))


def parse_field_rules(
    field_rules: Mapping[str, Any],
    values: Mapping[str, Any],
    registry: RuleRegistry,
) -> dict[str, list[RuleInvocation]]:
    """Parse the rule expressions of every field, keeping field order.

    Returns:
        Dict of field -> ordered RuleInvocations
    """
    parsed: dict[str, list[RuleInvocation]] = {}
    for key, expression in field_rules.items():
        parsed[key] = [
            parse_token(token, key, values, registry)
            for token in split_expression(expression)
        ]
    return parsed

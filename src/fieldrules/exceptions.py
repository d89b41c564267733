"""Exception hierarchy for fieldrules."""


class FieldRulesError(Exception):
    """Base error for the fieldrules engine."""
    pass


class MissingTargetError(FieldRulesError):
    """A field named in the rule map has no value (or the value is False).

    Raised inside execute() and turned into an ABORTED result at its boundary.
    """

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing validation target '{field}'")


class UnknownRuleError(FieldRulesError):
    """A rule expression names a rule with no registered validator."""

    def __init__(self, rule: str, field: str | None = None):
        self.rule = rule
        self.field = field
        where = f" (field '{field}')" if field else ""
        super().__init__(f"No validator registered for rule '{rule}'{where}")


class RuleSpecError(FieldRulesError, TypeError):
    """A rule spec passed to the registry has no usable validator."""
    pass


class RuleExpressionError(FieldRulesError, ValueError):
    """A field's rule expression is neither a string nor a list of tokens."""
    pass


class RulesetError(FieldRulesError):
    """A ruleset file could not be loaded."""
    pass

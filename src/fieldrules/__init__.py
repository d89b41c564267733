"""fieldrules: declarative field validation.

Rules are plain functions registered by name. Each field is given a rule
expression, either pipe-delimited ('required|between:1,10') or a list of
tokens, and FieldValidator.execute() reports the first failing rule of
every field.

Usage:
    from fieldrules import FieldValidator

    validator = FieldValidator(
        rules={"required": lambda value, params: value in (None, "")},
        messages={"required": "This field is required"},
    )
    result = validator.execute({"name": ""}, {"name": "required"})
    result.errors.to_dict()  # {"name": ["This field is required"]}

Rule functions return True when the value VIOLATES the rule.
"""

from fieldrules.collection import ErrorCollection
from fieldrules.config import EngineConfig
from fieldrules.engine import FieldValidator
from fieldrules.exceptions import (
    FieldRulesError,
    MissingTargetError,
    RuleExpressionError,
    RulesetError,
    RuleSpecError,
    UnknownRuleError,
)
from fieldrules.messages import MessageResolver
from fieldrules.parser import parse_field_rules, parse_token, split_expression
from fieldrules.registry import RuleRegistry
from fieldrules.ruleset import Ruleset, load_ruleset, validate_ruleset_file
from fieldrules.types import (
    Outcome,
    Rule,
    RuleDefinition,
    RuleInvocation,
    ValidationResult,
    Violation,
)

__all__ = [
    # Types
    "Outcome",
    "Rule",
    "RuleDefinition",
    "RuleInvocation",
    "ValidationResult",
    "Violation",
    "ErrorCollection",
    # Engine
    "EngineConfig",
    "FieldValidator",
    "MessageResolver",
    "RuleRegistry",
    # Parsing
    "parse_field_rules",
    "parse_token",
    "split_expression",
    # Rulesets
    "Ruleset",
    "load_ruleset",
    "validate_ruleset_file",
    # Errors
    "FieldRulesError",
    "MissingTargetError",
    "RuleExpressionError",
    "RulesetError",
    "RuleSpecError",
    "UnknownRuleError",
]

"""Core types for the fieldrules engine.

This module defines the foundational types shared by the registry, parser
and executor:
- RuleInvocation: one parsed rule token (name + params)
- RuleDefinition: a registered validator with optional preparer and message
- Rule: protocol for objects that can be registered directly
- ValidationResult: the three-outcome result of an execute() call
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Protocol, Union

if TYPE_CHECKING:
    from fieldrules.collection import ErrorCollection

# Validator signature: returns True when the value VIOLATES the rule.
RuleFunction = Callable[[Any, "list[str] | None"], bool]

# Preparer signature: rewrites [name, param_string] using all field values.
PrepareFunction = Callable[[dict[str, Any], str, list[Any]], list[Any]]

MessageFactory = Callable[[Any, "list[str] | None"], str]
RuleMessage = Union[str, MessageFactory]


class Outcome(Enum):
    """Outcome of a single execute() call.

    VALID: every field passed
    INVALID: at least one field recorded an error
    ABORTED: a validation target was missing; no errors are reported
    """

    VALID = "valid"
    INVALID = "invalid"
    ABORTED = "aborted"


@dataclass(frozen=True)
class RuleInvocation:
    """A rule token parsed from a field's rule expression.

    Examples:
        'required'     -> RuleInvocation(name='required', params=None)
        'between:1,10' -> RuleInvocation(name='between', params=['1', '10'])

    Attributes:
        name: Registered rule name
        params: Parameters split on ',' or None when the token had no ':' part
    """

    name: str
    params: list[str] | None = None


class Rule(Protocol):
    """Protocol for rule objects registered without a plain function.

    evaluate() follows the same polarity as rule functions: True means the
    value violates the rule. prepare() is optional.
    """

    def evaluate(self, value: Any, params: list[str] | None) -> bool:
        ...


@dataclass
class RuleDefinition:
    """A rule held by the registry.

    Attributes:
        name: Unique rule name
        validate: Rule function (True = violation)
        prepare: Optional token rewriter run before params are parsed
        message: Default message (string or factory), None if never given
    """

    name: str
    validate: RuleFunction
    prepare: PrepareFunction | None = None
    message: RuleMessage | None = None

    def evaluate(self, value: Any, params: list[str] | None) -> bool:
        return bool(self.validate(value, params))

    def prepare_tokens(
        self, values: dict[str, Any], key: str, tokens: list[Any]
    ) -> list[Any]:
        if self.prepare is None:
            return tokens
        return list(self.prepare(values, key, tokens))


@dataclass(frozen=True)
class Violation:
    """A failed rule for one field.

    Attributes:
        invocation: The rule invocation that failed
        value: The value that failed it
        unknown: True when no validator is registered for the rule name
    """

    invocation: RuleInvocation
    value: Any
    unknown: bool = False

    @property
    def name(self) -> str:
        return self.invocation.name


@dataclass
class ValidationResult:
    """Result of validating a set of values.

    Attributes:
        status: VALID, INVALID or ABORTED
        errors: Collected messages, or None when the call aborted
        aborted_field: Field whose missing target aborted the call
    """

    status: Outcome
    errors: "ErrorCollection | None" = None
    aborted_field: str | None = None

    @property
    def valid(self) -> bool:
        return self.status == Outcome.VALID

    @property
    def aborted(self) -> bool:
        return self.status == Outcome.ABORTED

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"status": self.status.value}
        if self.errors is not None:
            result["errors"] = self.errors.to_dict()
        if self.aborted_field is not None:
            result["abortedField"] = self.aborted_field
        return result

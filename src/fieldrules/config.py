"""Engine configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

UNKNOWN_RULE_POLICIES = ("report", "raise")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


@dataclass
class EngineConfig:
    """Behavior switches for FieldValidator.

    Attributes:
        false_is_missing: Treat a value of exactly False like a missing key
            (aborts the call). Matches the historical behavior.
        unknown_rule: "report" records a diagnostic message for rules with
            no validator; "raise" raises UnknownRuleError.
        default_message: Template used when a rule has no message. Receives
            the rule name as {rule}.
    """

    false_is_missing: bool = True
    unknown_rule: str = "report"
    default_message: str = "{rule} was undefined"

    def __post_init__(self) -> None:
        if self.unknown_rule not in UNKNOWN_RULE_POLICIES:
            raise ValueError(
                f"unknown_rule must be one of {', '.join(UNKNOWN_RULE_POLICIES)}, "
                f"got {self.unknown_rule!r}"
            )
        try:
            self.default_message.format(rule="rule")
        except (AttributeError, IndexError, KeyError, ValueError) as exc:
            raise ValueError(
                f"default_message may only use the {{rule}} placeholder, "
                f"got {self.default_message!r}"
            ) from exc

    @classmethod
    def from_env(cls) -> EngineConfig:
        """Create config from environment variables.

        Reads FIELDRULES_FALSE_IS_MISSING, FIELDRULES_UNKNOWN_RULE and
        FIELDRULES_DEFAULT_MESSAGE; unset variables keep their defaults.
        """
        kwargs: dict[str, Any] = {}

        raw = os.environ.get("FIELDRULES_FALSE_IS_MISSING")
        if raw is not None:
            kwargs["false_is_missing"] = _parse_bool("FIELDRULES_FALSE_IS_MISSING", raw)

        policy = os.environ.get("FIELDRULES_UNKNOWN_RULE")
        if policy:
            kwargs["unknown_rule"] = policy.strip().lower()

        template = os.environ.get("FIELDRULES_DEFAULT_MESSAGE")
        if template:
            kwargs["default_message"] = template

        return cls(**kwargs)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EngineConfig:
        """Create config from a ruleset's `config` block."""
        return cls(
            false_is_missing=data.get("false_is_missing", True),
            unknown_rule=data.get("unknown_rule", "report"),
            default_message=data.get("default_message", "{rule} was undefined"),
        )

    def format_default_message(self, rule: str) -> str:
        return self.default_message.format(rule=rule)

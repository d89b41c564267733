"""
ruleset.py: load rule definitions from YAML ruleset files.

A ruleset names rule functions by import path so a FieldValidator can be
configured without writing registration code:

    rules:
      required: myapp.rules:required
      same: [myapp.rules:same, myapp.rules:prepare_same]
    messages:
      required: "This field is required"
      min: myapp.rules:min_message
    message_factories: [min]
    config:
      unknown_rule: raise

Files are checked against ``schemas/ruleset.schema.json`` before any import
path is resolved. JSON documents load too, since YAML is a superset of JSON.

Usage:
    from fieldrules.ruleset import load_ruleset, validate_ruleset_file

    issues = validate_ruleset_file(Path("rules.yaml"))
    validator = load_ruleset(Path("rules.yaml")).build_validator()
"""
from __future__ import annotations

import importlib
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from fieldrules.config import EngineConfig
from fieldrules.engine import FieldValidator
from fieldrules.exceptions import RulesetError
from fieldrules.types import RuleMessage

logger = logging.getLogger(__name__)

_SCHEMA_PATH = Path(__file__).parent / "schemas" / "ruleset.schema.json"


# ---------------------------------------------------------------------------
# Public data types
# ---------------------------------------------------------------------------


@dataclass
class RulesetIssue:
    """A single schema finding for a ruleset file."""

    file: Path
    message: str
    path: str = ""  # location within the document, e.g. "rules/same[1]"

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        return f"[ERROR] {self.file}{loc}: {self.message}"


@dataclass
class Ruleset:
    """Resolved contents of a ruleset file.

    Attributes:
        rules: Rule name -> rule function or (validator, preparer) tuple
        messages: Rule name -> message string or factory
        config: Engine configuration from the `config` block
        source: File the ruleset was loaded from
    """

    rules: dict[str, Any] = field(default_factory=dict)
    messages: dict[str, RuleMessage] = field(default_factory=dict)
    config: EngineConfig = field(default_factory=EngineConfig)
    source: Path | None = None

    def build_validator(self) -> FieldValidator:
        return FieldValidator(self.rules, self.messages, config=self.config)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_schema() -> dict[str, Any]:
    with _SCHEMA_PATH.open() as fh:
        return json.load(fh)


def _json_path(error: ValidationError) -> str:
    """Convert a jsonschema ValidationError path to a readable string."""
    parts = []
    for p in error.absolute_path:
        if isinstance(p, int):
            parts.append(f"[{p}]")
        else:
            parts.append(str(p))
    return "/".join(parts).replace("/[", "[")


def resolve_import_path(reference: str) -> Any:
    """Resolve ``package.module:attribute`` to the object it names.

    Raises:
        RulesetError: If the module cannot be imported or lacks the attribute
    """
    module_name, _, attr_path = reference.partition(":")
    if not module_name or not attr_path:
        raise RulesetError(f"Invalid import path '{reference}', expected 'module:attribute'")

    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise RulesetError(f"Cannot import module '{module_name}': {exc}") from exc

    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError as exc:
            raise RulesetError(f"'{module_name}' has no attribute '{attr_path}'") from exc
    return obj


def load_document(path: Path) -> Any:
    """Parse a YAML or JSON file.

    Raises:
        RulesetError: If the file cannot be read or parsed
    """
    try:
        with path.open() as fh:
            return yaml.safe_load(fh)
    except OSError as exc:
        raise RulesetError(f"Cannot read {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise RulesetError(f"YAML parse error in {path}: {exc}") from exc


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_ruleset_document(doc: Any, file: Path) -> list[RulesetIssue]:
    """Validate a parsed ruleset document against the ruleset schema."""
    if doc is None:
        return [RulesetIssue(file=file, message="File is empty or contains only whitespace")]

    validator = Draft202012Validator(_load_schema())
    issues = [
        RulesetIssue(file=file, message=error.message, path=_json_path(error))
        for error in sorted(validator.iter_errors(doc), key=_json_path)
    ]

    if not issues:
        # message_factories must name entries of `messages`
        messages = doc.get("messages") or {}
        for name in doc.get("message_factories") or []:
            if name not in messages:
                issues.append(
                    RulesetIssue(
                        file=file,
                        message=f"'{name}' is listed in message_factories but has no message",
                        path="message_factories",
                    )
                )
    return issues


def validate_ruleset_file(path: Path) -> list[RulesetIssue]:
    """
    Validate a ruleset file without importing any of the rules it names.

    Returns:
        A list of :class:`RulesetIssue` objects (empty on success).
    """
    try:
        doc = load_document(path)
    except RulesetError as exc:
        return [RulesetIssue(file=path, message=str(exc))]
    return validate_ruleset_document(doc, path)


def load_ruleset(path: Path) -> Ruleset:
    """Load, validate and resolve a ruleset file.

    Raises:
        RulesetError: On parse errors, schema issues or unresolvable imports
    """
    doc = load_document(path)
    issues = validate_ruleset_document(doc, path)
    if issues:
        details = "; ".join(str(issue) for issue in issues)
        raise RulesetError(f"Invalid ruleset {path}: {details}")

    rules: dict[str, Any] = {}
    for name, reference in doc["rules"].items():
        if isinstance(reference, list):
            rules[name] = tuple(resolve_import_path(ref) for ref in reference)
        else:
            rules[name] = resolve_import_path(reference)

    factories = set(doc.get("message_factories") or [])
    messages: dict[str, RuleMessage] = {}
    for name, message in (doc.get("messages") or {}).items():
        messages[name] = resolve_import_path(message) if name in factories else message

    try:
        config = EngineConfig.from_dict(doc.get("config") or {})
    except ValueError as exc:
        raise RulesetError(f"Invalid config in {path}: {exc}") from exc

    logger.debug("Loaded %d rule(s) from %s", len(rules), path)
    return Ruleset(rules=rules, messages=messages, config=config, source=path)

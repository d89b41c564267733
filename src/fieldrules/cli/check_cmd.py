"""The `check` command: validate a values document against field rules."""

import json
from pathlib import Path

import click

from fieldrules.exceptions import FieldRulesError
from fieldrules.ruleset import load_document, load_ruleset

EXIT_VALID = 0
EXIT_INVALID = 1
EXIT_ABORTED = 2
EXIT_ERROR = 3

_existing_file = click.Path(exists=True, dir_okay=False, path_type=Path)


def _load_mapping(path: Path, what: str) -> dict:
    doc = load_document(path)
    if doc is None:
        return {}
    if not isinstance(doc, dict):
        raise click.BadParameter(f"{what} file must contain a mapping", param_hint=str(path))
    return doc


@click.command()
@click.argument("ruleset_path", metavar="RULESET", type=_existing_file)
@click.argument("values_path", metavar="VALUES", type=_existing_file)
@click.argument("fields_path", metavar="FIELDS", type=_existing_file)
@click.option(
    "--messages",
    "messages_path",
    default=None,
    type=_existing_file,
    help="YAML/JSON file of per-field message overrides ({field: {rule: message}}).",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result as JSON.")
def check(
    ruleset_path: Path,
    values_path: Path,
    fields_path: Path,
    messages_path: Path | None,
    as_json: bool,
):
    """Validate VALUES against the rule expressions in FIELDS.

    Exit status is 0 when valid, 1 when errors were found and 2 when the
    run was aborted by a missing field value. Broken rulesets, unknown
    rules under `unknown_rule: raise` and malformed rule expressions exit
    with 3.
    """
    try:
        validator = load_ruleset(ruleset_path).build_validator()
        values = _load_mapping(values_path, "Values")
        fields = _load_mapping(fields_path, "Fields")
        overrides = _load_mapping(messages_path, "Messages") if messages_path else None
        result = validator.execute(values, fields, overrides)
    except FieldRulesError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(EXIT_ERROR)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, default=str))
    elif result.aborted:
        click.echo(click.style(f"Aborted: missing value for '{result.aborted_field}'", fg="yellow"))
    elif result.valid:
        click.echo(click.style("All fields are valid.", fg="green", bold=True))
    else:
        for field, messages in result.errors.items():
            for message in messages:
                click.echo(click.style(f"{field}: {message}", fg="red"))
        click.echo(click.style(f"\n{len(result.errors)} field(s) failed", fg="red", bold=True))

    if result.aborted:
        raise SystemExit(EXIT_ABORTED)
    if not result.valid:
        raise SystemExit(EXIT_INVALID)

"""Ruleset CLI commands."""

from pathlib import Path

import click

from fieldrules.exceptions import RulesetError
from fieldrules.ruleset import load_ruleset, validate_ruleset_file


@click.group()
def ruleset():
    """Ruleset file commands."""
    pass


@ruleset.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--resolve",
    is_flag=True,
    default=False,
    help="Also import every rule and message factory the file names.",
)
def validate(path: Path, resolve: bool):
    """Validate a ruleset file against the ruleset schema."""
    issues = validate_ruleset_file(path)

    for issue in issues:
        click.echo(click.style(str(issue), fg="red"))

    if issues:
        click.echo(click.style(f"\n{len(issues)} schema error(s) found", fg="red", bold=True))
        raise SystemExit(1)

    if resolve:
        try:
            loaded = load_ruleset(path)
        except RulesetError as e:
            click.echo(click.style(f"Import resolution failed: {e}", fg="red"), err=True)
            raise SystemExit(1)

        click.echo(f"Resolved {len(loaded.rules)} rules:")
        for name in sorted(loaded.rules):
            click.echo(f"  ✓ {name}")

    click.echo(click.style("Ruleset is valid.", fg="green", bold=True))

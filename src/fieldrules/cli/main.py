"""fieldrules CLI entry point."""

import logging

import click


@click.group()
@click.option(
    "--log-level",
    default="warning",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    help="Logging level for engine diagnostics.",
)
def cli(log_level: str):
    """fieldrules: declarative field validation CLI."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register subcommands
from fieldrules.cli.check_cmd import check  # noqa: E402
from fieldrules.cli.ruleset_cmd import ruleset  # noqa: E402

cli.add_command(check)
cli.add_command(ruleset)

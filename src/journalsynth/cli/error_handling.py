"""CLI error handling helpers."""

from decimal import Decimal

import click

from journalsynth.domain.errors import DomainError

company_option = click.option(
    "--company",
    "company_id",
    required=True,
    envvar="JOURNALSYNTH_COMPANY",
    help="Company identifier (or JOURNALSYNTH_COMPANY)",
)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def format_amount(amount: Decimal) -> str:
    return f"{amount:,.2f}"

"""Integration readiness command."""

import click
from journalsynth.cli.commands.integrate import build_limits, limit_options
from journalsynth.cli.error_handling import company_option, format_amount, handle_domain_error
from journalsynth.domain.errors import DomainError
from journalsynth.domain.status import IntegrationStatusService


def _mark(flag: bool) -> str:
    return "yes" if flag else "no"


@click.command("status")
@company_option
@limit_options
@click.pass_context
def status(ctx, company_id: str, max_transactions: int | None, max_lines: int | None, max_amount: str | None):
    """Show whether a company is ready for integration.

    Examples:
        journalsynth status --company acme
    """
    db = ctx.obj["db"]

    try:
        limits = build_limits(max_transactions, max_lines, max_amount)
        report = IntegrationStatusService(db, limits=limits).get_status(company_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"\nIntegration status for {company_id}:")
    click.echo("-" * 60)
    click.echo(f"Entities registered:      {report.total_entities}")
    click.echo(f"Entities with an account: {report.entities_with_account} ({report.coverage_percentage}%)")
    click.echo(f"Active entities:          {report.active_entities}")
    click.echo(f"Central accounts:         {'configured' if report.defaults_configured else 'not configured'}")
    click.echo(f"  Default accounts:       {_mark(report.has_default_accounts)}")
    click.echo(f"  Tax accounts:           {_mark(report.has_tax_accounts)}")
    click.echo(f"  Counterparty accounts:  {_mark(report.has_counterparty_accounts)}")
    click.echo(
        f"Batch limits:             {report.limits.max_transactions} transactions, "
        f"{report.limits.max_lines} lines, {format_amount(report.limits.max_amount)}"
    )
    click.echo(f"Ready for processing:     {_mark(report.ready_for_processing)}")


def register_commands(cli):
    """Register status command with main CLI."""
    cli.add_command(status)

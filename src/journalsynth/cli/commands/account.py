"""Chart of accounts commands."""

import click
from journalsynth.cli.error_handling import company_option, handle_domain_error
from journalsynth.domain.errors import DomainError
from journalsynth.domain.registry import RegistryService


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("add")
@click.argument("code", metavar="CODE")
@click.argument("name", metavar="NAME")
@click.option("--inactive", is_flag=True, help="Register the account as inactive")
@company_option
@click.pass_context
def add_account(ctx, code: str, name: str, inactive: bool, company_id: str):
    """Add or update a ledger account.

    Examples:
        journalsynth account add 5.1.1.001 "Operating Expenses" --company acme
        journalsynth account add 1.1.4.001 "VAT Input Credit" --company acme
    """
    db = ctx.obj["db"]

    try:
        service = RegistryService(db, company_id)
        service.add_account(code, name, is_active=not inactive)
        click.echo(f"Saved account {code} '{name}'{' (inactive)' if inactive else ''}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@company_option
@click.pass_context
def list_accounts(ctx, company_id: str):
    """List the chart of accounts."""
    db = ctx.obj["db"]

    try:
        accounts = RegistryService(db, company_id).list_accounts()
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        status = "" if acc.is_active else " (inactive)"
        click.echo(f"{acc.code:12s} | {acc.name}{status}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")

"""Central account configuration commands."""

import click
from journalsynth.cli.error_handling import company_option, handle_domain_error
from journalsynth.domain.errors import DomainError
from journalsynth.domain.registry import DEFAULT_FIELDS, RegistryService

LABELS = {
    "default_expense": "Default expense",
    "default_income": "Default income",
    "input_tax": "Input VAT",
    "output_tax": "Output VAT",
    "payables": "Suppliers",
    "receivables": "Customers",
}


@click.group()
def defaults_group():
    """Manage company central accounts."""
    pass


@defaults_group.command("set")
@click.option("--expense", "default_expense", help="Default expense account code")
@click.option("--income", "default_income", help="Default income account code")
@click.option("--input-tax", help="Input VAT account code")
@click.option("--output-tax", help="Output VAT account code")
@click.option("--payables", help="Suppliers account code")
@click.option("--receivables", help="Customers account code")
@company_option
@click.pass_context
def set_defaults(ctx, company_id: str, **codes: str | None):
    """Set central accounts by chart code.

    Accounts not given keep their current value.

    Examples:
        journalsynth defaults set --expense 5.1.1.001 --input-tax 1.1.4.001 --company acme
    """
    db = ctx.obj["db"]

    try:
        saved = RegistryService(db, company_id).set_defaults(**{k: v for k, v in codes.items() if v})
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo("Central accounts saved:")
    _show(saved)


@defaults_group.command("show")
@company_option
@click.pass_context
def show_defaults(ctx, company_id: str):
    """Show central accounts."""
    db = ctx.obj["db"]

    try:
        current = RegistryService(db, company_id).get_defaults()
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if current is None:
        click.echo("No central accounts configured; built-in defaults will be used.")
        return
    _show(current)


def _show(defaults):
    for name in DEFAULT_FIELDS:
        account = getattr(defaults, name)
        click.echo(f"  {LABELS[name]:16s} {account.code:12s} {account.name}")


def register_commands(cli):
    """Register defaults commands with main CLI."""
    cli.add_command(defaults_group, name="defaults")

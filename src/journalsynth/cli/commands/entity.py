"""Entity registry commands."""

import click
from journalsynth.cli.error_handling import company_option, handle_domain_error
from journalsynth.domain.errors import DomainError
from journalsynth.domain.registry import RegistryService


@click.group()
def entity_group():
    """Manage supplier and customer account mappings."""
    pass


@entity_group.command("set")
@click.argument("tax_id", metavar="TAX_ID")
@click.argument("name", metavar="NAME")
@click.option("--account", "account_code", help="Ledger account code the entity posts to")
@click.option("--cost-center", help="Cost center tag carried on the entity's lines")
@click.option("--inactive", is_flag=True, help="Mark the entity as inactive")
@company_option
@click.pass_context
def set_entity(
    ctx,
    tax_id: str,
    name: str,
    account_code: str | None,
    cost_center: str | None,
    inactive: bool,
    company_id: str,
):
    """Register an entity and its account.

    Examples:
        journalsynth entity set 76.123.456-7 "Acme Supplies" --account 5.1.2.010 --company acme
        journalsynth entity set 11111111-1 "Walk-in Customer" --company acme
    """
    db = ctx.obj["db"]

    try:
        normalized = RegistryService(db, company_id).set_entity(
            tax_id, name, account_code=account_code, cost_center=cost_center, is_active=not inactive
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Saved entity {normalized} '{name}'")
    if account_code is None:
        click.echo("No account set; the entity will post to the company default account")


@entity_group.command("override")
@click.argument("tax_id", metavar="TAX_ID")
@click.argument("document_type", metavar="DOCUMENT_TYPE")
@click.argument("account_code", metavar="ACCOUNT_CODE")
@company_option
@click.pass_context
def override_account(ctx, tax_id: str, document_type: str, account_code: str, company_id: str):
    """Route one document type of an entity to a specific account.

    DOCUMENT_TYPE is a document code (33, 61, ...) or name (credit_note).

    Examples:
        journalsynth entity override 76123456-7 61 5.1.9.001 --company acme
    """
    db = ctx.obj["db"]

    try:
        parsed = RegistryService(db, company_id).set_override(tax_id, document_type, account_code)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Documents of type {parsed.value} ({parsed.name.lower()}) now post to {account_code}")


@entity_group.command("list")
@company_option
@click.pass_context
def list_entities(ctx, company_id: str):
    """List registered entities."""
    db = ctx.obj["db"]

    try:
        mappings = RegistryService(db, company_id).list_entities()
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not mappings:
        click.echo("No entities found.")
        return

    click.echo("\nEntities:")
    click.echo("-" * 80)
    for mapping in mappings:
        account = mapping.account.code if mapping.account else "(default)"
        flags = []
        if mapping.cost_center:
            flags.append(f"cc {mapping.cost_center}")
        if not mapping.is_active:
            flags.append("inactive")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        click.echo(f"{mapping.entity_tax_id:12s} | {mapping.entity_name:30s} | {account}{suffix}")
        for document_type, override in sorted(
            mapping.document_type_accounts.items(), key=lambda item: item[0].value
        ):
            click.echo(f"{'':12s} |   type {document_type.value} -> {override.code} {override.name}")


def register_commands(cli):
    """Register entity commands with main CLI."""
    cli.add_command(entity_group, name="entity")

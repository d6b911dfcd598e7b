"""Register integration command."""

from datetime import date
from decimal import Decimal, InvalidOperation

import click
from journalsynth.cli.error_handling import company_option, format_amount, handle_domain_error
from journalsynth.domain.csv_import import load_transactions
from journalsynth.domain.entities import Direction, IntegrationOptions, IntegrationResult
from journalsynth.domain.errors import DomainError
from journalsynth.domain.export import write_export_csv
from journalsynth.domain.integration import IntegrationService
from journalsynth.settings import load_batch_limits
from journalsynth.utils.date_parser import parse_date


def limit_options(func):
    """Attach the batch limit options to a command."""
    func = click.option(
        "--max-amount",
        type=str,
        envvar="JOURNALSYNTH_MAX_AMOUNT",
        help="Maximum total amount per batch (or JOURNALSYNTH_MAX_AMOUNT)",
    )(func)
    func = click.option(
        "--max-lines",
        type=int,
        envvar="JOURNALSYNTH_MAX_LINES",
        help="Maximum detail lines per entry (or JOURNALSYNTH_MAX_LINES)",
    )(func)
    func = click.option(
        "--max-transactions",
        type=int,
        envvar="JOURNALSYNTH_MAX_TRANSACTIONS",
        help="Maximum transactions per batch (or JOURNALSYNTH_MAX_TRANSACTIONS)",
    )(func)
    return func


def build_limits(max_transactions: int | None, max_lines: int | None, max_amount: str | None):
    """Resolve limits from options; raises ConfigurationError on bad values."""
    amount = None
    if max_amount is not None:
        try:
            amount = Decimal(max_amount)
        except InvalidOperation:
            raise click.BadParameter(f"'{max_amount}' is not a number", param_hint="--max-amount")
    return load_batch_limits(max_transactions=max_transactions, max_lines=max_lines, max_amount=amount)


@click.command("integrate")
@click.argument("file", type=click.Path(exists=True, dir_okay=False), metavar="FILE")
@company_option
@click.option("--period", required=True, help="Source period (YYYY-MM, 202403, 03/2024, 'last month')")
@click.option(
    "--direction",
    type=click.Choice(["purchase", "sale"], case_sensitive=False),
    default="purchase",
    show_default=True,
    help="Register the file belongs to",
)
@click.option("--force", is_flag=True, help="Post uncovered entities to default accounts")
@click.option("--save", is_flag=True, help="Store accepted entries")
@click.option("--detailed", is_flag=True, help="One set of lines per transaction instead of per account")
@click.option("--keep-invalid", is_flag=True, help="Show entries that failed the balance audit")
@click.option("--entry-date", help="Entry date (defaults to the last day of the period)")
@click.option("--decimal-separator", type=click.Choice([".", ","]), default=".", help="Amount decimal separator")
@click.option("--export", "export_path", type=click.Path(dir_okay=False), help="Write entry lines to a CSV file")
@limit_options
@click.pass_context
def integrate(
    ctx,
    file: str,
    company_id: str,
    period: str,
    direction: str,
    force: bool,
    save: bool,
    detailed: bool,
    keep_invalid: bool,
    entry_date: str | None,
    decimal_separator: str,
    export_path: str | None,
    max_transactions: int | None,
    max_lines: int | None,
    max_amount: str | None,
) -> None:
    """Turn a register file into batched journal entries.

    Without --save the run is a preview: entries are synthesized and
    audited but nothing is stored.

    Examples:
        journalsynth integrate compras_2024_03.csv --company acme --period 2024-03
        journalsynth integrate ventas.csv --company acme --period 2024-03 --direction sale --save
        journalsynth integrate compras.csv --company acme --period 2024-03 --force --export lines.csv
    """
    db = ctx.obj["db"]

    try:
        limits = build_limits(max_transactions, max_lines, max_amount)
        parsed_date: date | None = parse_date(entry_date) if entry_date else None
        loaded = load_transactions(file, Direction.parse(direction), decimal_separator=decimal_separator)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
        return

    for error in loaded.errors:
        click.echo(f"Skipped {error}", err=True)
    if not loaded.transactions:
        click.echo("Error: No transactions could be read from the file", err=True)
        ctx.exit(1)

    options = IntegrationOptions(
        force=force,
        save=save,
        detailed=detailed,
        keep_invalid=keep_invalid,
        entry_date=parsed_date,
    )
    service = IntegrationService(db, limits=limits)

    try:
        result = service.integrate(company_id, period, direction, loaded.transactions, options)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    _show_result(result)

    if export_path and result.entries:
        rows = write_export_csv(result.entries, export_path)
        click.echo(f"Exported {rows} lines to {export_path}")

    if result.blocked or result.persistence_failures:
        ctx.exit(1)


def _show_result(result: IntegrationResult) -> None:
    validation = result.validation
    for warning in validation.warnings:
        click.echo(f"Warning: {warning}", err=True)
    for error in validation.errors:
        click.echo(f"Error: {error}", err=True)

    if result.blocked:
        click.echo("\nIntegration blocked.")
        if validation.missing_entities:
            click.echo(f"Entities not in the registry: {', '.join(validation.missing_entities)}")
        if validation.missing_accounts:
            click.echo(f"Entities without a usable account: {', '.join(validation.missing_accounts)}")
        click.echo("Register them with 'entity set' or rerun with --force.")
        return

    for entry in result.entries:
        click.echo(f"\n{entry.reference}  {entry.entry_date.isoformat()}  {entry.description}")
        click.echo("-" * 80)
        for line in entry.lines:
            debit = format_amount(line.debit_amount) if line.debit_amount else ""
            credit = format_amount(line.credit_amount) if line.credit_amount else ""
            click.echo(f"{line.account_code:12s} {line.account_name[:34]:34s} {debit:>15s} {credit:>15s}")
        click.echo(f"{'':47s} {format_amount(entry.total_debit):>15s} {format_amount(entry.total_credit):>15s}")

    for batch in result.batches:
        if not batch.success:
            click.echo(f"Batch {batch.batch_number} failed: {batch.error}", err=True)
    for failure in result.persistence_failures:
        click.echo(f"Not stored: {failure.reference}: {failure.error}", err=True)

    summary = result.summary
    click.echo("\nIntegration complete:")
    click.echo(f"  Transactions: {summary.total_transactions}")
    click.echo(f"  Batches: {summary.successful_batches}/{summary.total_batches} balanced")
    click.echo(f"  Entries: {summary.entries_generated} ({summary.total_lines} lines)")
    click.echo(f"  Stored: {summary.entries_persisted}")
    click.echo(f"  Total amount: {format_amount(summary.total_amount)}")


def register_commands(cli):
    """Register integrate command with main CLI."""
    cli.add_command(integrate)

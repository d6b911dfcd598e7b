"""Main CLI entry point."""

import logging

import click
from journalsynth.database.factories import create_database

# Import and register all commands at module level
from journalsynth.cli.commands import (
    account,
    entity,
    defaults,
    integrate,
    status,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides JOURNALSYNTH_DB_PATH environment variable)",
    envvar="JOURNALSYNTH_DB_PATH",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug details of each run")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Journalsynth - Register to journal integration.

    Turn purchase and sales register transactions into balanced, batched
    double-entry journal entries, using a company's entity registry and
    chart of accounts.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
entity.register_commands(cli)
defaults.register_commands(cli)
integrate.register_commands(cli)
status.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()

"""Main CLI entry point."""

import click
from pydantic import ValidationError as SettingsValidationError

from caixa.config import LedgerSettings
from caixa.database.factories import create_sqlite_database
from caixa.log_config import configure_logging

# Import and register all commands at module level
from caixa.cli.commands import (
    account,
    sale,
    expense,
    bill,
    holiday,
    closing,
    liquidation,
    pending,
    summary,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides CAIXA_DB_PATH environment variable)",
    envvar="CAIXA_DB_PATH",
)
@click.option("--log-level", help="Logging level (overrides CAIXA_LOG_LEVEL)")
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None):
    """Caixa - restaurant cash ledger.

    Records sales and expenses across the cash, PIX and reserve accounts,
    settles card sales on the next business day and allocates each day's
    revenue into the investment, debt payoff and payroll reserves.
    """
    ctx.ensure_object(dict)

    overrides = {}
    if db_path:
        overrides["db_path"] = db_path
    if log_level:
        overrides["log_level"] = log_level
    try:
        settings = LedgerSettings(**overrides)
    except SettingsValidationError as e:
        click.echo(f"Error: Invalid configuration: {e}", err=True)
        ctx.exit(1)

    configure_logging(settings.log_level, settings.log_json)
    ctx.obj["settings"] = settings

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=settings.db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
sale.register_commands(cli)
expense.register_commands(cli)
bill.register_commands(cli)
holiday.register_commands(cli)
closing.register_commands(cli)
liquidation.register_commands(cli)
pending.register_commands(cli)
summary.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()

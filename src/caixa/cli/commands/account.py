"""Account commands."""

import click

from caixa.cli.date_filters import period_options, resolve_cli_date_range
from caixa.cli.error_handling import handle_domain_error, parse_amount_or_exit, parse_date_or_exit
from caixa.domain.account import AccountService
from caixa.domain.entities import AccountId
from caixa.domain.errors import DomainError
from caixa.domain.transaction import TransactionService
from caixa.utils.amount_parser import format_brl

ACCOUNT_CHOICE = click.Choice([a.value for a in AccountId])


@click.group()
def account_group():
    """Inspect and adjust ledger accounts."""
    pass


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List accounts and balances."""
    service = AccountService(ctx.obj["db"])

    accounts = service.list_accounts()
    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        click.echo(f"{acc.id.value:16s} | {acc.name:28s} | {format_brl(acc.balance):>14s}")
    click.echo("-" * 60)
    click.echo(f"{'Total':47s} | {format_brl(service.total_balance()):>14s}")


@account_group.command("set-balance")
@click.argument("account", type=ACCOUNT_CHOICE)
@click.argument("amount")
@click.option("--date", "on", help="Adjustment date (defaults to today)")
@click.pass_context
def set_balance(ctx, account: str, amount: str, on: str | None) -> None:
    """Set the balance of an account (initial balance configuration).

    Examples:
        caixa account set-balance cash 500
        caixa account set-balance pix "1.250,00" --date 2025-11-03
    """
    service = AccountService(ctx.obj["db"])
    value = parse_amount_or_exit(ctx, amount)
    adjustment_date = parse_date_or_exit(ctx, on) if on else None

    if not click.confirm(f"Set balance of '{account}' to {format_brl(value)}?", default=True):
        click.echo("Cancelled.")
        return

    try:
        service.set_balance(account, value, on=adjustment_date)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Balance of '{account}' set to {format_brl(value)}")


@account_group.command("statement")
@click.argument("account", type=ACCOUNT_CHOICE)
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative)")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative)")
@period_options
@click.pass_context
def statement(
    ctx,
    account: str,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    this_week: bool,
    last_month: bool,
    last_week: bool,
) -> None:
    """Show an account statement rebuilt from the transaction log.

    Examples:
        caixa account statement pix --this-month
        caixa account statement cash --start-date 2025-11-01 --end-date 2025-11-15
    """
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-month": this_month,
            "this-week": this_week,
            "last-month": last_month,
            "last-week": last_week,
        },
    )
    service = TransactionService(ctx.obj["db"])
    lines = service.statement(account, start_date=start, end_date=end)
    if not lines:
        click.echo("No transactions found.")
        return

    click.echo(f"\nStatement for {account}:")
    click.echo("-" * 100)
    for line in lines:
        amount = "=" + format_brl(line.balance) if line.is_adjustment else format_brl(line.amount)
        click.echo(
            f"{line.date.isoformat()} | {line.category.value:18s} | {line.description[:40]:40s} | "
            f"{amount:>14s} | {format_brl(line.balance):>14s}"
        )


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")

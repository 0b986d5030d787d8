"""Expense commands."""

import click

from caixa.cli.commands.account import ACCOUNT_CHOICE
from caixa.cli.date_filters import period_options, resolve_cli_date_range
from caixa.cli.error_handling import handle_domain_error, parse_amount_or_exit, parse_date_or_exit
from caixa.domain.errors import DomainError
from caixa.domain.expense import ExpenseService
from caixa.utils.amount_parser import format_brl


@click.group()
def expense_group():
    """Record and manage expenses."""
    pass


@expense_group.command("add")
@click.option("--date", "expense_date", default="today", show_default=True, help="Expense date")
@click.option("--amount", required=True, help="Expense amount")
@click.option("--account", required=True, type=ACCOUNT_CHOICE, help="Account the money leaves")
@click.option("--description", required=True, help="Expense description")
@click.option("--category", default="geral", show_default=True, help="Expense category")
@click.pass_context
def add_expense(
    ctx, expense_date: str, amount: str, account: str, description: str, category: str
):
    """Record an expense.

    Examples:
        caixa expense add --amount 80 --account cash --description "Gás" --category insumos
    """
    service = ExpenseService(ctx.obj["db"])
    day = parse_date_or_exit(ctx, expense_date)
    value = parse_amount_or_exit(ctx, amount)

    try:
        expense_id = service.add_expense(
            date=day, amount=value, account=account, description=description, category=category
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created expense {expense_id}")
    click.echo(f"  Date: {day.isoformat()}")
    click.echo(f"  Amount: {format_brl(value)} from {account}")
    click.echo(f"  Description: {description}")


@expense_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative)")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative)")
@click.option("--account", type=ACCOUNT_CHOICE, help="Only expenses paid from this account")
@period_options
@click.pass_context
def list_expenses(
    ctx,
    start_date: str | None,
    end_date: str | None,
    account: str | None,
    this_month: bool,
    this_week: bool,
    last_month: bool,
    last_week: bool,
):
    """List expenses."""
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
    expenses = ExpenseService(ctx.obj["db"]).list_expenses(start, end, account)
    if not expenses:
        click.echo("No expenses found.")
        return

    click.echo(f"\nExpenses ({len(expenses)}):")
    click.echo("-" * 90)
    for e in expenses:
        click.echo(
            f"ID: {e.id:4d} | {e.date.isoformat()} | {e.account.value:16s} | {e.payment_method.value:4s} | "
            f"{format_brl(e.amount):>12s} | {e.category[:15]:15s} | {e.description[:30]}"
        )
    click.echo("-" * 90)
    click.echo(f"Total: {format_brl(sum(e.amount for e in expenses))}")


@expense_group.command("delete")
@click.argument("expense_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_expense(ctx, expense_id: int, yes: bool):
    """Delete an expense and credit its amount back."""
    service = ExpenseService(ctx.obj["db"])
    try:
        expense = service.get_expense(expense_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(
        f"Delete expense {expense_id} ({expense.description}, {format_brl(expense.amount)})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_expense(expense_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted expense {expense_id}")


def register_commands(cli):
    """Register expense commands with main CLI."""
    cli.add_command(expense_group, name="expense")

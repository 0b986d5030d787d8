"""Bill (payable/receivable) commands."""

import click

from caixa.cli.commands.account import ACCOUNT_CHOICE
from caixa.cli.error_handling import handle_domain_error, parse_amount_or_exit, parse_date_or_exit
from caixa.domain.bill import DEFAULT_REMINDER_DAYS, BillService
from caixa.domain.entities import Bill, BillStatus, BillType
from caixa.domain.errors import DomainError
from caixa.utils.amount_parser import format_brl


def _echo_bill(service: BillService, bill: Bill) -> None:
    status = service.effective_status(bill)
    paid = f" (paid {format_brl(bill.paid_amount)})" if bill.paid_amount > 0 else ""
    click.echo(
        f"ID: {bill.id:4d} | {bill.bill_type.value:10s} | due {bill.due_date.isoformat()} | "
        f"{status.value:7s} | {format_brl(bill.amount):>12s}{paid} | {bill.description}"
    )


@click.group()
def bill_group():
    """Manage bills payable and receivable."""
    pass


@bill_group.command("add")
@click.option("--type", "bill_type", required=True, type=click.Choice([t.value for t in BillType]))
@click.option("--amount", required=True, help="Bill amount")
@click.option("--description", required=True, help="Bill description")
@click.option("--due", "due_date", required=True, help="Due date")
@click.option("--category", help="Category")
@click.option("--counterparty", help="Supplier or customer")
@click.pass_context
def add_bill(
    ctx,
    bill_type: str,
    amount: str,
    description: str,
    due_date: str,
    category: str | None,
    counterparty: str | None,
):
    """Add a bill.

    Examples:
        caixa bill add --type payable --amount 1200 --description "Aluguel" --due 2025-11-10
    """
    service = BillService(ctx.obj["db"])
    value = parse_amount_or_exit(ctx, amount)
    due = parse_date_or_exit(ctx, due_date, "due date")
    try:
        bill_id = service.add_bill(
            bill_type=bill_type,
            amount=value,
            description=description,
            due_date=due,
            category=category,
            counterparty=counterparty,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created bill {bill_id} ({bill_type}, {format_brl(value)}, due {due.isoformat()})")


@bill_group.command("list")
@click.option("--type", "bill_type", type=click.Choice([t.value for t in BillType]))
@click.option("--status", type=click.Choice([s.value for s in BillStatus]))
@click.pass_context
def list_bills(ctx, bill_type: str | None, status: str | None):
    """List bills by due date."""
    service = BillService(ctx.obj["db"])
    bills = service.list_bills(bill_type=bill_type, status=status)
    if not bills:
        click.echo("No bills found.")
        return
    click.echo(f"\nBills ({len(bills)}):")
    click.echo("-" * 100)
    for bill in bills:
        _echo_bill(service, bill)


@bill_group.command("pay")
@click.argument("bill_id", type=int)
@click.option("--account", required=True, type=ACCOUNT_CHOICE, help="Account used for the payment")
@click.option("--amount", help="Amount paid now (defaults to the remaining amount)")
@click.option("--date", "paid_date", help="Payment date (defaults to today)")
@click.pass_context
def pay_bill(ctx, bill_id: int, account: str, amount: str | None, paid_date: str | None):
    """Pay (or receive) a bill, fully or partially.

    Examples:
        caixa bill pay 3 --account pix
        caixa bill pay 3 --account cash --amount 200
    """
    service = BillService(ctx.obj["db"])
    value = parse_amount_or_exit(ctx, amount) if amount else None
    on = parse_date_or_exit(ctx, paid_date) if paid_date else None
    try:
        bill = service.pay_bill(bill_id, account=account, amount=value, paid_date=on)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if bill.status == BillStatus.PAID:
        click.echo(f"Bill {bill_id} fully settled ({format_brl(bill.paid_amount)})")
    else:
        click.echo(
            f"Bill {bill_id} partially settled: {format_brl(bill.paid_amount)} paid, "
            f"{format_brl(bill.amount)} remaining"
        )


@bill_group.command("delete")
@click.argument("bill_id", type=int)
@click.pass_context
def delete_bill(ctx, bill_id: int):
    """Delete a bill with no payments."""
    try:
        BillService(ctx.obj["db"]).delete_bill(bill_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted bill {bill_id}")


@bill_group.command("due")
@click.option("--days", default=DEFAULT_REMINDER_DAYS, show_default=True, type=int)
@click.pass_context
def due_bills(ctx, days: int):
    """Show pending bills due within the next days (overdue included)."""
    service = BillService(ctx.obj["db"])
    bills = service.upcoming_bills(within_days=days)
    if not bills:
        click.echo("No bills due.")
        return
    for bill in bills:
        _echo_bill(service, bill)


def register_commands(cli):
    """Register bill commands with main CLI."""
    cli.add_command(bill_group, name="bill")

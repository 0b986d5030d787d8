"""Sale commands."""

import click

from caixa.cli.date_filters import period_options, resolve_cli_date_range
from caixa.cli.error_handling import handle_domain_error, parse_amount_or_exit, parse_date_or_exit
from caixa.domain.entities import CardBrand, PaymentMethod
from caixa.domain.errors import DomainError
from caixa.domain.sale import SaleService
from caixa.domain.settlement import SettlementScheduler
from caixa.domain.holiday import HolidayService
from caixa.utils.amount_parser import format_brl


def _sale_service(ctx) -> SaleService:
    db = ctx.obj["db"]
    settings = ctx.obj["settings"]
    scheduler = SettlementScheduler(
        HolidayService(db).is_holiday, max_attempts=settings.settlement_max_attempts
    )
    return SaleService(db, scheduler=scheduler)


@click.group()
def sale_group():
    """Record and manage sales."""
    pass


@sale_group.command("add")
@click.option("--date", "sale_date", default="today", show_default=True, help="Sale date")
@click.option("--amount", required=True, help="Gross sale amount (e.g., 100.00 or 'R$ 1.234,56')")
@click.option(
    "--method",
    required=True,
    type=click.Choice([m.value for m in PaymentMethod]),
    help="Payment method",
)
@click.option(
    "--brand",
    type=click.Choice([b.value for b in CardBrand]),
    help="Card brand (credit and debit only)",
)
@click.option("--description", help="Sale description")
@click.option("--type", "sale_type", help="Sale type tag (e.g., 'almoço', 'delivery')")
@click.pass_context
def add_sale(
    ctx,
    sale_date: str,
    amount: str,
    method: str,
    brand: str | None,
    description: str | None,
    sale_type: str | None,
):
    """Record a sale.

    Cash and PIX sales are credited immediately; card sales are settled on
    the next business day.

    Examples:
        caixa sale add --amount 45.90 --method pix
        caixa sale add --date yesterday --amount 100 --method credit --brand visa_master
    """
    service = _sale_service(ctx)
    day = parse_date_or_exit(ctx, sale_date)
    value = parse_amount_or_exit(ctx, amount)

    try:
        sale_id = service.add_sale(
            date=day,
            amount=value,
            payment_method=method,
            card_brand=brand,
            description=description,
            sale_type=sale_type,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    sale = service.get_sale(sale_id)
    click.echo(f"Created sale {sale_id}")
    click.echo(f"  Date: {sale.date.isoformat()}")
    click.echo(f"  Amount: {format_brl(sale.amount)} ({sale.payment_method.value})")
    if sale.payment_method.is_card:
        liquidation = ctx.obj["db"].get_card_liquidation_for_sale(sale_id)
        click.echo(f"  Fee: {format_brl(liquidation.fee_amount)}")
        click.echo(f"  Net: {format_brl(liquidation.net_amount)}")
        click.echo(f"  Settlement: {liquidation.settlement_date.isoformat()}")


@sale_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative)")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative)")
@click.option("--method", type=click.Choice([m.value for m in PaymentMethod]), help="Payment method")
@period_options
@click.pass_context
def list_sales(
    ctx,
    start_date: str | None,
    end_date: str | None,
    method: str | None,
    this_month: bool,
    this_week: bool,
    last_month: bool,
    last_week: bool,
):
    """List sales."""
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
    sales = SaleService(ctx.obj["db"]).list_sales(start, end, method)
    if not sales:
        click.echo("No sales found.")
        return

    click.echo(f"\nSales ({len(sales)}):")
    click.echo("-" * 90)
    for s in sales:
        status = ""
        if s.payment_method.is_card:
            status = (
                f"liquidated {s.liquidation_date.isoformat()}" if s.liquidated else "awaiting settlement"
            )
        click.echo(
            f"ID: {s.id:4d} | {s.date.isoformat()} | {s.payment_method.value:6s} | "
            f"{format_brl(s.amount):>12s} | {(s.description or '')[:24]:24s} | {status}"
        )
    total = sum(s.amount for s in sales)
    click.echo("-" * 90)
    click.echo(f"Total: {format_brl(total)}")


@sale_group.command("delete")
@click.argument("sale_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_sale(ctx, sale_id: int, yes: bool):
    """Delete a sale and reverse its balance effect."""
    service = SaleService(ctx.obj["db"])
    try:
        sale = service.get_sale(sale_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(
        f"Delete sale {sale_id} of {format_brl(sale.amount)} on {sale.date.isoformat()}?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_sale(sale_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted sale {sale_id}")


def register_commands(cli):
    """Register sale commands with main CLI."""
    cli.add_command(sale_group, name="sale")

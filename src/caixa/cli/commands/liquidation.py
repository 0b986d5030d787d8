"""Card liquidation commands."""

import click

from caixa.cli.error_handling import handle_domain_error, parse_date_or_exit
from caixa.domain.errors import DomainError
from caixa.domain.liquidation import LiquidationService
from caixa.utils.amount_parser import format_brl


@click.group()
def liquidation_group():
    """Card settlements (D+1 liquidations)."""
    pass


@liquidation_group.command("list")
@click.option("--pending", "only_pending", is_flag=True, help="Only liquidations not yet processed")
@click.pass_context
def list_liquidations(ctx, only_pending: bool):
    """List card liquidations."""
    service = LiquidationService(ctx.obj["db"], ctx.obj["settings"])
    liquidations = service.list_liquidations(liquidated=False if only_pending else None)
    if not liquidations:
        click.echo("No card liquidations found.")
        return
    for liq in liquidations:
        status = f"liquidated {liq.liquidated_on.isoformat()}" if liq.liquidated else "pending"
        click.echo(
            f"ID: {liq.id:4d} | sale {liq.sale_id:4d} of {liq.sale_date.isoformat()} | "
            f"{liq.payment_method.value}/{liq.card_brand.value} | gross {format_brl(liq.gross_amount)} | "
            f"fee {format_brl(liq.fee_amount)} | net {format_brl(liq.net_amount)} | "
            f"settles {liq.settlement_date.isoformat()} | {status}"
        )


@liquidation_group.command("process")
@click.option("--date", "day", default="today", show_default=True, help="Processing date")
@click.option("--no-compensate", is_flag=True, help="Do not compensate pendings afterwards")
@click.pass_context
def process_liquidations(ctx, day: str, no_compensate: bool):
    """Credit matured card sales to the PIX account.

    Examples:
        caixa liquidations process
        caixa liquidations process --date 2025-11-03
    """
    service = LiquidationService(ctx.obj["db"], ctx.obj["settings"])
    run_date = parse_date_or_exit(ctx, day)
    try:
        run = service.process_liquidations(run_date, compensate=False)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Processed {len(run.processed)} liquidation(s) on {run_date.isoformat()}")
    if run.processed:
        click.echo(f"  Gross: {format_brl(run.gross_total)}")
        click.echo(f"  Fees: {format_brl(run.fee_total)}")
        click.echo(f"  Net: {format_brl(run.net_total)}")
    for liquidation_id, error in run.failed.items():
        click.echo(f"Error: liquidation {liquidation_id} failed: {error}", err=True)

    # Liquidations above are committed even if compensation fails
    if not no_compensate:
        try:
            compensated = service.pendings.compensate_pendings(on=run_date)
        except DomainError as e:
            handle_domain_error(ctx, e)
        if compensated:
            click.echo(f"Compensated {len(compensated)} pending(s)")
    if run.failed:
        ctx.exit(1)


def register_commands(cli):
    """Register liquidation commands with main CLI."""
    cli.add_command(liquidation_group, name="liquidations")

"""End-of-day command."""

import click

from caixa.cli.error_handling import handle_domain_error, parse_date_or_exit
from caixa.domain.closing import EndOfDayService
from caixa.domain.errors import DomainError
from caixa.utils.amount_parser import format_brl


@click.command("close-day")
@click.option("--date", "day", default="today", show_default=True, help="Day to close")
@click.option("--preview", is_flag=True, help="Show revenue and targets without moving money")
@click.pass_context
def close_day(ctx, day: str, preview: bool):
    """Allocate a day's revenue into the reserve accounts.

    Moves the investment and debt payoff shares out of PIX and the fixed
    payroll reserve out of cash. Shortfalls become pendings. A day can only
    be closed once.

    Examples:
        caixa close-day
        caixa close-day --date yesterday --preview
    """
    service = EndOfDayService(ctx.obj["db"], ctx.obj["settings"])
    closing_date = parse_date_or_exit(ctx, day)
    revenue = service.get_revenue(closing_date)

    click.echo(f"Revenue for {closing_date.isoformat()}: {format_brl(revenue.total)}")
    click.echo(f"  Sales: {format_brl(revenue.sales)}")
    click.echo(f"  Receivables: {format_brl(revenue.receivables)}")
    click.echo(f"  Card settlements: {format_brl(revenue.card_settlements)}")

    if preview:
        for rule, target in service.targets(revenue.total):
            click.echo(f"  Target {rule.pending_type.value}: {format_brl(target)}")
        if service.is_closed(closing_date):
            click.echo("Day already closed.")
        return

    try:
        report = service.execute_end_of_day(closing_date)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not report.closed:
        click.echo("Nothing to allocate.")
        return

    for outcome in report.outcomes:
        line = (
            f"  {outcome.pending_type.value:16s} target {format_brl(outcome.target):>12s} "
            f"moved {format_brl(outcome.transferred):>12s}"
        )
        if not outcome.fully_funded:
            line += f" pending {format_brl(outcome.shortfall)}"
        click.echo(line)
    click.echo(f"Day {closing_date.isoformat()} closed.")


def register_commands(cli):
    """Register end-of-day command with main CLI."""
    cli.add_command(close_day)

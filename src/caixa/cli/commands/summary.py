"""Summary command."""

import click

from caixa.cli.date_filters import period_options, resolve_cli_date_range
from caixa.cli.error_handling import handle_domain_error
from caixa.domain.errors import DomainError
from caixa.domain.report import ReportService
from caixa.utils.amount_parser import format_brl


@click.command("summary")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative)")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative)")
@period_options
@click.pass_context
def summary(
    ctx,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    this_week: bool,
    last_month: bool,
    last_week: bool,
):
    """Show sales, expenses, net result and open bills.

    Defaults to the current month.

    Examples:
        caixa summary
        caixa summary --last-month
        caixa summary --start-date 2025-11-01 --end-date 2025-11-15
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
    try:
        report = ReportService(ctx.obj["db"]).period_summary(start, end)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nSummary {report.start_date.isoformat()} to {report.end_date.isoformat()}")
    click.echo("-" * 60)
    click.echo(f"{'Sales':<40} {format_brl(report.total_sales):>19}")
    for method, total in report.sales_by_method.items():
        if total:
            click.echo(f"    {method.value:<36} {format_brl(total):>19}")
    click.echo(f"{'Expenses':<40} {format_brl(report.total_expenses):>19}")
    for category, total in sorted(report.expenses_by_category.items(), key=lambda item: -item[1]):
        click.echo(f"    {category[:36]:<36} {format_brl(total):>19}")
    click.echo("-" * 60)
    click.echo(f"{'Net result':<40} {format_brl(report.net_result):>19}")
    click.echo("=" * 60)
    click.echo(f"{'Open payables':<40} {format_brl(report.open_payables):>19}")
    click.echo(f"{'Open receivables':<40} {format_brl(report.open_receivables):>19}")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)

"""Holiday calendar commands."""

import click

from caixa.cli.error_handling import handle_domain_error, parse_date_or_exit
from caixa.domain.errors import DomainError
from caixa.domain.holiday import HolidayService


@click.group()
def holiday_group():
    """Manage the holiday calendar used for card settlement."""
    pass


@holiday_group.command("add")
@click.argument("day", metavar="DATE")
@click.argument("name")
@click.pass_context
def add_holiday(ctx, day: str, name: str):
    """Register a holiday.

    Examples:
        caixa holiday add 2025-11-20 "Consciência Negra"
    """
    holiday_date = parse_date_or_exit(ctx, day)
    try:
        HolidayService(ctx.obj["db"]).add_holiday(holiday_date, name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added holiday '{name}' on {holiday_date.isoformat()}")


@holiday_group.command("remove")
@click.argument("day", metavar="DATE")
@click.pass_context
def remove_holiday(ctx, day: str):
    """Remove a holiday.

    Settlements already scheduled are not moved.
    """
    holiday_date = parse_date_or_exit(ctx, day)
    try:
        HolidayService(ctx.obj["db"]).remove_holiday(holiday_date)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Removed holiday on {holiday_date.isoformat()}")


@holiday_group.command("list")
@click.option("--year", type=int, help="Only holidays in this year")
@click.pass_context
def list_holidays(ctx, year: int | None):
    """List holidays."""
    holidays = HolidayService(ctx.obj["db"]).list_holidays(year)
    if not holidays:
        click.echo("No holidays found.")
        return
    for h in holidays:
        click.echo(f"{h.date.isoformat()} | {h.name}")


def register_commands(cli):
    """Register holiday commands with main CLI."""
    cli.add_command(holiday_group, name="holiday")

"""Pending compensation commands."""

import click

from caixa.cli.error_handling import parse_date_or_exit
from caixa.domain.pending import PendingService
from caixa.utils.amount_parser import format_brl


@click.group()
def pending_group():
    """Allocation shortfalls awaiting compensation."""
    pass


@pending_group.command("list")
@click.pass_context
def list_pendings(ctx):
    """List outstanding pendings in compensation order."""
    service = PendingService(ctx.obj["db"])
    pendings = service.list_pendings()
    if not pendings:
        click.echo("No pendings.")
        return
    for p in pendings:
        click.echo(
            f"ID: {p.id:4d} | {p.date.isoformat()} | {p.pending_type.value:16s} | "
            f"{format_brl(p.amount):>12s} | {p.description}"
        )
    click.echo(f"Total outstanding: {format_brl(service.total_outstanding())}")


@pending_group.command("compensate")
@click.option("--date", "day", help="Date of the compensation transactions (defaults to today)")
@click.pass_context
def compensate(ctx, day: str | None):
    """Retire pendings whose source account can now cover them in full."""
    service = PendingService(ctx.obj["db"])
    on = parse_date_or_exit(ctx, day) if day else None
    retired = service.compensate_pendings(on=on)
    click.echo(f"Compensated {len(retired)} pending(s)")
    for p in retired:
        click.echo(f"  {p.pending_type.value}: {format_brl(p.amount)}")
    remaining = service.total_outstanding()
    if remaining > 0:
        click.echo(f"Still outstanding: {format_brl(remaining)}")


def register_commands(cli):
    """Register pending commands with main CLI."""
    cli.add_command(pending_group, name="pendings")

"""CLI command for the availability report."""

from __future__ import annotations

import click

from menaje.application.show_availability import ShowAvailabilityHandler
from menaje.domain.exceptions import DomainException
from menaje.domain.model.value_objects import DateRange
from menaje.infrastructure.bootstrap import commitment_policy, unit_of_work


@click.command("availability")
@click.option("--from", "date_from", required=True, help="First day (YYYY-MM-DD).")
@click.option("--to", "date_to", default=None, help="Last day (YYYY-MM-DD); defaults to --from.")
@click.option("--exclude", "exclude_reservation", type=int, default=None,
              help="Reservation ID whose own lines should not count.")
def availability(date_from: str, date_to: str | None, exclude_reservation: int | None) -> None:
    """Show free units per item for a date window."""
    handler = ShowAvailabilityHandler(uow=unit_of_work(), policy=commitment_policy())

    try:
        window = DateRange.of(date_from, date_to)
        lines = handler.handle(window, exclude_reservation=exclude_reservation)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not lines:
        click.echo("No items in the catalog.")
        return

    click.echo(f"Availability for {window}")
    click.echo(f"{'Item':<24} {'Unit':<8} {'Stock':>6} {'Reserved':>9} {'Free':>6}")
    click.echo("-" * 57)
    for line in lines:
        flag = "" if line.activo else "  (inactive)"
        click.echo(
            f"{line.nombre:<24} {line.unidad:<8} {line.stock_total:>6} {line.reservado:>9} {line.disponible:>6}{flag}"
        )

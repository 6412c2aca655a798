"""CLI commands for event reservations."""

from __future__ import annotations

import click

from menaje.application.dto import LineSpec
from menaje.application.get_or_create_reservation import GetOrCreateReservationHandler
from menaje.application.list_items import ListItemsHandler
from menaje.application.read_reservation import ReadReservationHandler
from menaje.application.register_return import RegisterReturnHandler
from menaje.application.reservation_calendar import ReservationCalendarHandler
from menaje.application.save_reservation_lines import SaveReservationLinesHandler
from menaje.application.set_reservation_notes import SetReservationNotesHandler
from menaje.application.set_reservation_state import SetReservationStateHandler
from menaje.domain.exceptions import DomainException, InsufficientStockError
from menaje.domain.model.reservation import ReservationState
from menaje.domain.model.value_objects import DateRange
from menaje.infrastructure.bootstrap import (
    commitment_policy,
    max_retries,
    unit_of_work,
    window_policy,
)


def _parse_items(raw: str) -> list[LineSpec]:
    """Parse 'Mesa redonda:15,Silla:40' (names or IDs) into LineSpec list."""
    by_name = {
        item.nombre.lower(): item.id
        for item in ListItemsHandler(uow=unit_of_work()).handle(include_inactive=True)
    }
    specs: list[LineSpec] = []
    if not raw.strip():
        return specs
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ItemName:Quantity'."
            )
        name, qty_str = pair.rsplit(":", 1)
        name = name.strip()
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(f"Invalid quantity '{qty_str}' for item '{name}'.")
        if name.lower() in by_name:
            item_id = by_name[name.lower()]
        elif name.isdigit():
            item_id = int(name)
        else:
            raise click.BadParameter(f"Item not found: '{name}'.")
        specs.append(LineSpec(menaje_id=item_id, cantidad=qty))
    return specs


def _display_reservation(dto) -> None:
    """Shared formatting for displaying a reservation."""
    window = DateRange(dto.fecha_inicio, dto.fecha_fin)
    click.echo(f"Reservation #{dto.id}  (event={dto.evento_id}, status={dto.estado})")
    click.echo(f"Window:   {window}  ({window.days} day(s))")
    click.echo(f"Created:  {dto.created_at}")
    if dto.notas:
        click.echo(f"Notes:    {dto.notas}")
    click.echo()

    if not dto.lines:
        click.echo("  No items reserved.")
        return

    click.echo(f"  {'Item':<24} {'Quantity':>20} {'Lost':>6}")
    click.echo(f"  {'-'*52}")
    for line in dto.lines:
        lost = str(line.merma) if line.merma else ""
        click.echo(f"  {line.nombre:<24} {line.cantidad_label:>20} {lost:>6}")


@click.command("open")
@click.option("--event", "evento_id", required=True, help="Event ID.")
@click.option("--date", "fecha", required=True, help="Event date (YYYY-MM-DD).")
def reservation_open(evento_id: str, fecha: str) -> None:
    """Open (or fetch) the reservation of an event."""
    handler = GetOrCreateReservationHandler(uow=unit_of_work(), window_policy=window_policy())

    try:
        dto = handler.handle(evento_id, fecha)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_reservation(dto)


@click.command("show")
@click.option("--id", "reservation_id", required=True, type=int, help="Reservation ID.")
def reservation_show(reservation_id: int) -> None:
    """Show a reservation and its items."""
    handler = ReadReservationHandler(uow=unit_of_work())

    try:
        dto = handler.handle(reservation_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_reservation(dto)


@click.command("save")
@click.option("--id", "reservation_id", required=True, type=int, help="Reservation ID.")
@click.option("--items", required=True, help="Full item set as 'Item:Qty,Item:Qty' ('' clears it).")
def reservation_save(reservation_id: int, items: str) -> None:
    """Replace the items of a reservation (checks availability)."""
    specs = _parse_items(items)

    handler = SaveReservationLinesHandler(
        uow=unit_of_work(),
        policy=commitment_policy(),
        max_retries=max_retries(),
    )

    try:
        dto = handler.handle(reservation_id, specs)
    except InsufficientStockError as exc:
        click.echo("Not enough stock for:", err=True)
        for v in exc.violations:
            click.echo(f"  {v.nombre:<24} requested {v.requested:>5}, free {v.available:>5}", err=True)
        raise click.ClickException("Reservation not saved.")
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Reservation #{dto.id} saved: {len(dto.lines)} item(s), {dto.total_units} unit(s).")


@click.command("status")
@click.option("--id", "reservation_id", required=True, type=int, help="Reservation ID.")
@click.option(
    "--state",
    required=True,
    type=click.Choice([s.value for s in ReservationState]),
    help="Target state.",
)
def reservation_status(reservation_id: int, state: str) -> None:
    """Change the lifecycle state of a reservation."""
    handler = SetReservationStateHandler(
        uow=unit_of_work(),
        policy=commitment_policy(),
        max_retries=max_retries(),
    )

    try:
        dto = handler.handle(reservation_id, state)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Reservation #{dto.id} is now {dto.estado}.")


@click.command("calendar")
@click.option("--from", "date_from", required=True, help="First day (YYYY-MM-DD).")
@click.option("--to", "date_to", required=True, help="Last day (YYYY-MM-DD).")
@click.option(
    "--state",
    default=None,
    type=click.Choice([s.value for s in ReservationState]),
    help="Only reservations in this state.",
)
def reservation_calendar(date_from: str, date_to: str, state: str | None) -> None:
    """List reservations that fall inside a date range."""
    handler = ReservationCalendarHandler(uow=unit_of_work())

    try:
        entries = handler.handle(DateRange.of(date_from, date_to), estado=state)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not entries:
        click.echo("No reservations in that range.")
        return

    click.echo(f"{'ID':>4}  {'Event':<14} {'From':<10} {'To':<10} {'Status':<11} {'Units':>6}")
    click.echo("-" * 61)
    for dto in entries:
        click.echo(
            f"{dto.id:>4}  {dto.evento_id:<14} {dto.fecha_inicio.isoformat():<10} "
            f"{dto.fecha_fin.isoformat():<10} {dto.estado:<11} {dto.total_units:>6}"
        )


@click.command("return")
@click.option("--id", "reservation_id", required=True, type=int, help="Reservation ID.")
@click.option("--lost", "lost", default="", help="Units not returned as 'Item:Qty,Item:Qty'.")
def reservation_return(reservation_id: int, lost: str) -> None:
    """Register the return of a reservation's items, writing off losses."""
    specs = _parse_items(lost)

    handler = RegisterReturnHandler(uow=unit_of_work(), max_retries=max_retries())

    try:
        dto = handler.handle(reservation_id, specs)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    written_off = sum(line.merma for line in dto.lines)
    click.echo(f"Reservation #{dto.id} returned; {written_off} unit(s) written off stock.")


@click.command("notes")
@click.option("--id", "reservation_id", required=True, type=int, help="Reservation ID.")
@click.option("--text", required=True, help="Notes text ('' clears them).")
def reservation_notes(reservation_id: int, text: str) -> None:
    """Set the free-text notes of a reservation."""
    handler = SetReservationNotesHandler(uow=unit_of_work())

    try:
        dto = handler.handle(reservation_id, text)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Notes of reservation #{dto.id} {'updated' if dto.notas else 'cleared'}.")

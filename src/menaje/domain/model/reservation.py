"""Reservation aggregate — binds one event to a date window and item quantities.

The Reservation owns its lines.  Lines are always replaced wholesale; the
stock check that must precede a replacement lives in the Overlap Guard
domain service, because it needs every other reservation's lines.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum

from menaje.domain.exceptions import ValidationError
from menaje.domain.model.value_objects import DateRange, Quantity


class ReservationState(Enum):
    BORRADOR = "borrador"
    CONFIRMADO = "confirmado"
    DEVUELTO = "devuelto"
    CANCELADO = "cancelado"

    @property
    def is_terminal(self) -> bool:
        return self in (ReservationState.DEVUELTO, ReservationState.CANCELADO)

    @classmethod
    def parse(cls, raw: str) -> ReservationState:
        try:
            return cls((raw or "").strip().lower())
        except ValueError as exc:
            valid = ", ".join(s.value for s in cls)
            raise ValidationError(
                f"Unknown state '{raw}' (expected one of: {valid})"
            ) from exc


# Allowed transitions; same-state writes are accepted as no-ops.
_TRANSITIONS: dict[ReservationState, frozenset[ReservationState]] = {
    ReservationState.BORRADOR: frozenset(
        {ReservationState.CONFIRMADO, ReservationState.DEVUELTO, ReservationState.CANCELADO}
    ),
    ReservationState.CONFIRMADO: frozenset(
        {ReservationState.BORRADOR, ReservationState.DEVUELTO, ReservationState.CANCELADO}
    ),
    ReservationState.DEVUELTO: frozenset(),
    ReservationState.CANCELADO: frozenset(),
}


@dataclass(frozen=True)
class ReservationLine:
    """One (item, quantity) pair of a reservation.

    ``merma`` is the number of those units that did not come back, set
    when the return is registered.
    """

    menaje_id: int
    cantidad: Quantity
    merma: int = 0

    @property
    def devuelta(self) -> int:
        return self.cantidad.value - self.merma


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Reservation:
    """Aggregate root for an event's rental items.

    Use ``Reservation.open()`` for new reservations.  The ``__init__`` is
    kept simple so repositories can reconstitute persisted rows as-is.
    """

    id: int | None
    evento_id: str
    window: DateRange
    estado: ReservationState = ReservationState.BORRADOR
    lines: list[ReservationLine] = field(default_factory=list)
    notas: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    # --- Factory (used for NEW reservations only) -----------------------------

    @staticmethod
    def open(evento_id: str, window: DateRange) -> Reservation:
        if not evento_id or not str(evento_id).strip():
            raise ValidationError("Event id is required")
        return Reservation(id=None, evento_id=str(evento_id).strip(), window=window)

    # --- Lines ----------------------------------------------------------------

    def quantity_of(self, menaje_id: int) -> int:
        for line in self.lines:
            if line.menaje_id == menaje_id:
                return line.cantidad.value
        return 0

    @property
    def item_ids(self) -> set[int]:
        return {line.menaje_id for line in self.lines}

    def validate_lines(self, lines: list[ReservationLine]) -> None:
        """Check that *lines* may replace the current ones, without stock checks."""
        if self.estado.is_terminal:
            raise ValidationError(
                f"Cannot edit items of a reservation in {self.estado.value} state"
            )
        seen: set[int] = set()
        for line in lines:
            if line.menaje_id in seen:
                raise ValidationError(
                    f"Item {line.menaje_id} appears more than once in the proposed lines"
                )
            seen.add(line.menaje_id)

    def replace_lines(self, lines: list[ReservationLine]) -> None:
        """Replace every line; zero quantities are dropped.

        Availability must have been checked *before* calling this
        (coordinated by the application handler via the Overlap Guard).
        """
        self.validate_lines(lines)
        self.lines = [line for line in lines if not line.cantidad.is_zero]
        self.updated_at = _utcnow()

    # --- State transitions ----------------------------------------------------

    def can_transition_to(self, new_state: ReservationState) -> bool:
        return new_state == self.estado or new_state in _TRANSITIONS[self.estado]

    def set_estado(self, new_state: ReservationState) -> None:
        """Move to *new_state*.  Lines are kept as a historical record."""
        if new_state == self.estado:
            return
        if not self.can_transition_to(new_state):
            raise ValidationError(
                f"Cannot change reservation from {self.estado.value} to {new_state.value}"
            )
        self.estado = new_state
        self.updated_at = _utcnow()

    def register_return(self, mermas: dict[int, int]) -> None:
        """Close the reservation as returned, recording per-item shrinkage.

        *mermas* maps item id to units that did not come back.  Each item
        must be on the reservation and cannot lose more than went out;
        items not mentioned came back complete.
        """
        if self.estado.is_terminal:
            raise ValidationError(
                f"Cannot register the return of a reservation in {self.estado.value} state"
            )
        for menaje_id, merma in mermas.items():
            lost = Quantity(merma).value
            if menaje_id not in self.item_ids:
                raise ValidationError(f"Item {menaje_id} is not on this reservation")
            reserved = self.quantity_of(menaje_id)
            if lost > reserved:
                raise ValidationError(
                    f"Shrinkage of item {menaje_id} ({lost}) exceeds the {reserved} units reserved"
                )

        self.lines = [replace(line, merma=mermas.get(line.menaje_id, 0)) for line in self.lines]
        self.set_estado(ReservationState.DEVUELTO)

    # --- Notes ----------------------------------------------------------------

    def set_notas(self, notas: str | None) -> None:
        self.notas = (notas or "").strip() or None
        self.updated_at = _utcnow()

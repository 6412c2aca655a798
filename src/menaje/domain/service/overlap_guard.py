"""Domain service: Overlap Guard.

Validates a proposed line set for a reservation against what every other
overlapping reservation already holds.  The check is all-or-nothing: it
collects every violation first, and the caller writes nothing unless the
list is empty.

The guard must run inside the same transaction as the write that follows
it, after the involved items have been locked; otherwise two concurrent
saves can both see enough stock.
"""

from __future__ import annotations

from menaje.domain.exceptions import InsufficientStockError, StockViolation
from menaje.domain.model.inventory import InventoryItem
from menaje.domain.model.reservation import Reservation, ReservationLine
from menaje.domain.service.availability_calculator import AvailabilityCalculator


class OverlapGuard:

    def __init__(self, calculator: AvailabilityCalculator) -> None:
        self._calculator = calculator

    def violations(
        self,
        reservation: Reservation,
        proposed: list[ReservationLine],
        items: dict[int, InventoryItem],
    ) -> list[StockViolation]:
        """Return one violation per line asking for more than is free.

        Availability excludes *reservation* itself, so the cap for each
        item is ``stock_total - reserved_by_others``.
        """
        wanted = [line for line in proposed if not line.cantidad.is_zero]
        if not wanted:
            return []

        availability = self._calculator.availability(
            reservation.window,
            exclude_reservation=reservation.id,
            items=[items[line.menaje_id] for line in wanted],
        )

        found: list[StockViolation] = []
        for line in wanted:
            free = availability[line.menaje_id].disponible
            if line.cantidad.value > free:
                found.append(
                    StockViolation(
                        item_id=line.menaje_id,
                        nombre=items[line.menaje_id].nombre,
                        requested=line.cantidad.value,
                        available=free,
                    )
                )
        return found

    def ensure_available(
        self,
        reservation: Reservation,
        proposed: list[ReservationLine],
        items: dict[int, InventoryItem],
    ) -> None:
        """Raise InsufficientStockError if any proposed line overbooks."""
        found = self.violations(reservation, proposed, items)
        if found:
            raise InsufficientStockError(found)

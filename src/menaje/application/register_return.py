"""Application service: Register Return use case.

Closes a reservation once its items are back from the event.  Units that
did not come back (broken or lost, the "merma") are recorded on each
line and written off the item's physical stock, in the same unit of work
that moves the reservation to ``devuelto``.
"""

from __future__ import annotations

import logging

from menaje.application.dto import LineSpec, ReservationDTO, reservation_to_dto
from menaje.application.retry import DEFAULT_MAX_RETRIES, retry_on_conflict
from menaje.domain.exceptions import EntityNotFoundError, ValidationError
from menaje.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class RegisterReturnHandler:

    def __init__(self, uow: UnitOfWork, max_retries: int = DEFAULT_MAX_RETRIES) -> None:
        self._uow = uow
        self._max_retries = max_retries

    def handle(self, reservation_id: int, mermas: list[LineSpec]) -> ReservationDTO:
        """Register the return; *mermas* lists the units lost per item.

        Raises:
            EntityNotFoundError: the reservation does not exist.
            ValidationError: the reservation is already closed, or a
                shrinkage is negative, repeated, for an item not on the
                reservation, or larger than the reserved quantity.
        """
        shrinkage: dict[int, int] = {}
        for spec in mermas:
            if spec.menaje_id in shrinkage:
                raise ValidationError(f"Item {spec.menaje_id} appears more than once in the shrinkage")
            shrinkage[spec.menaje_id] = spec.cantidad

        return retry_on_conflict(
            lambda: self._register(reservation_id, shrinkage),
            self._max_retries,
            f"Registering return of reservation #{reservation_id}",
        )

    def _register(self, reservation_id: int, shrinkage: dict[int, int]) -> ReservationDTO:
        with self._uow:
            reservation = self._uow.reservations.get_by_id(reservation_id, lock=True)
            if reservation is None:
                raise EntityNotFoundError(f"Reservation #{reservation_id} not found")

            reservation.register_return(shrinkage)

            items = self._uow.catalog.get_many(sorted(reservation.item_ids), lock=True)
            for line in reservation.lines:
                if line.merma == 0:
                    continue
                item = items[line.menaje_id]
                item.set_stock(max(0, item.stock_total - line.merma))
                self._uow.catalog.save(item)

            self._uow.reservations.save(reservation)
            self._uow.commit()

        lost = sum(line.merma for line in reservation.lines)
        if lost:
            logger.warning(
                "Reservation #%s returned with %d unit(s) of shrinkage written off stock",
                reservation_id,
                lost,
            )
        else:
            logger.info("Reservation #%s returned complete", reservation_id)
        return reservation_to_dto(reservation, items)

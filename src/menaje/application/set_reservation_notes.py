"""Application service: Set Reservation Notes use case."""

from __future__ import annotations

from menaje.application.dto import ReservationDTO, reservation_to_dto
from menaje.domain.exceptions import EntityNotFoundError
from menaje.domain.repository.unit_of_work import UnitOfWork


class SetReservationNotesHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, reservation_id: int, notas: str | None) -> ReservationDTO:
        """Replace the free-text notes; blank text clears them."""
        with self._uow:
            reservation = self._uow.reservations.get_by_id(reservation_id, lock=True)
            if reservation is None:
                raise EntityNotFoundError(f"Reservation #{reservation_id} not found")
            reservation.set_notas(notas)
            self._uow.reservations.save(reservation)
            items = self._uow.catalog.get_many(reservation.item_ids)
            self._uow.commit()
        return reservation_to_dto(reservation, items)

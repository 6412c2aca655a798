"""Application service: Read Reservation use case (query)."""

from __future__ import annotations

from menaje.application.dto import ReservationDTO, reservation_to_dto
from menaje.domain.exceptions import EntityNotFoundError
from menaje.domain.repository.unit_of_work import UnitOfWork


class ReadReservationHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, reservation_id: int) -> ReservationDTO:
        with self._uow:
            reservation = self._uow.reservations.get_by_id(reservation_id)
            if reservation is None:
                raise EntityNotFoundError(f"Reservation #{reservation_id} not found")
            items = self._uow.catalog.get_many(reservation.item_ids)
        return reservation_to_dto(reservation, items)

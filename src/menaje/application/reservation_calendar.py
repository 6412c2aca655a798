"""Application service: Reservation Calendar use case (query).

Lists the reservations that fall entirely inside a date range, e.g. to
lay them out on a month view.
"""

from __future__ import annotations

from menaje.application.dto import ReservationDTO, reservation_to_dto
from menaje.domain.model.reservation import ReservationState
from menaje.domain.model.value_objects import DateRange
from menaje.domain.repository.unit_of_work import UnitOfWork


class ReservationCalendarHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        window: DateRange,
        estado: str | ReservationState | None = None,
    ) -> list[ReservationDTO]:
        states = None
        if estado is not None:
            if not isinstance(estado, ReservationState):
                estado = ReservationState.parse(estado)
            states = [estado]

        with self._uow:
            reservations = self._uow.reservations.list_within(window, states)
            item_ids: set[int] = set()
            for reservation in reservations:
                item_ids |= reservation.item_ids
            items = self._uow.catalog.get_many(item_ids)

        return [reservation_to_dto(r, items) for r in reservations]

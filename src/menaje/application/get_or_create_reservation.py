"""Application service: Get-or-Create Reservation use case.

Every event has exactly one reservation.  The first call for an event
opens an empty draft whose window comes from the window policy; later
calls return the existing reservation unchanged.

Two callers may race to open the same event's reservation.  The store
rejects the second insert (unique event id) and the loser simply reads
back the winner's reservation.
"""

from __future__ import annotations

import logging
from datetime import date

from menaje.application.dto import ReservationDTO, reservation_to_dto
from menaje.domain.exceptions import DuplicateEntityError
from menaje.domain.model.policies import WindowPolicy
from menaje.domain.model.reservation import Reservation
from menaje.domain.model.value_objects import DateRange
from menaje.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class GetOrCreateReservationHandler:

    def __init__(self, uow: UnitOfWork, window_policy: WindowPolicy) -> None:
        self._uow = uow
        self._window_policy = window_policy

    def handle(self, evento_id: str, evento_fecha: str | date) -> ReservationDTO:
        fecha = DateRange.of(evento_fecha).start
        existing = self._find(evento_id)
        if existing is not None:
            return existing

        reservation = Reservation.open(evento_id, self._window_policy.window_for(fecha))
        try:
            with self._uow:
                self._uow.reservations.add(reservation)
                self._uow.commit()
        except DuplicateEntityError:
            logger.info("Reservation for event %s was created concurrently; reusing it", evento_id)
            existing = self._find(evento_id)
            if existing is None:
                raise
            return existing

        logger.info(
            "Opened reservation #%s for event %s (%s)",
            reservation.id,
            reservation.evento_id,
            reservation.window,
        )
        return reservation_to_dto(reservation, {})

    def _find(self, evento_id: str) -> ReservationDTO | None:
        with self._uow:
            reservation = self._uow.reservations.get_by_evento(str(evento_id).strip())
            if reservation is None:
                return None
            items = self._uow.catalog.get_many(reservation.item_ids)
        return reservation_to_dto(reservation, items)

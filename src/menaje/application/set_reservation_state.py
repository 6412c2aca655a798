"""Application service: Set Reservation State use case.

A pure state write in the usual case.  The one exception: when drafts do
not hold stock, confirming a draft starts holding its lines, so the
Overlap Guard re-checks them in the same unit of work first.
"""

from __future__ import annotations

import logging

from menaje.application.dto import ReservationDTO, reservation_to_dto
from menaje.application.retry import DEFAULT_MAX_RETRIES, retry_on_conflict
from menaje.domain.exceptions import EntityNotFoundError, ValidationError
from menaje.domain.model.policies import CommitmentPolicy
from menaje.domain.model.reservation import ReservationState
from menaje.domain.repository.unit_of_work import UnitOfWork
from menaje.domain.service.availability_calculator import AvailabilityCalculator
from menaje.domain.service.overlap_guard import OverlapGuard

logger = logging.getLogger(__name__)


class SetReservationStateHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        policy: CommitmentPolicy,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ) -> None:
        self._uow = uow
        self._policy = policy
        self._max_retries = max_retries

    def handle(self, reservation_id: int, new_state: str | ReservationState) -> ReservationDTO:
        if not isinstance(new_state, ReservationState):
            new_state = ReservationState.parse(new_state)
        return retry_on_conflict(
            lambda: self._transition(reservation_id, new_state),
            self._max_retries,
            f"Changing state of reservation #{reservation_id}",
        )

    def _transition(self, reservation_id: int, new_state: ReservationState) -> ReservationDTO:
        with self._uow:
            reservation = self._uow.reservations.get_by_id(reservation_id, lock=True)
            if reservation is None:
                raise EntityNotFoundError(f"Reservation #{reservation_id} not found")

            previous = reservation.estado
            if not reservation.can_transition_to(new_state):
                raise ValidationError(
                    f"Cannot change reservation from {previous.value} to {new_state.value}"
                )

            starts_holding = not self._policy.commits(previous) and self._policy.commits(new_state)
            items = self._uow.catalog.get_many(sorted(reservation.item_ids), lock=starts_holding)
            if starts_holding:
                guard = OverlapGuard(
                    AvailabilityCalculator(self._uow.catalog, self._uow.reservations, self._policy)
                )
                guard.ensure_available(reservation, reservation.lines, items)

            reservation.set_estado(new_state)
            self._uow.reservations.save(reservation)
            self._uow.commit()

        if previous != new_state:
            logger.info(
                "Reservation #%s moved from %s to %s", reservation_id, previous.value, new_state.value
            )
        return reservation_to_dto(reservation, items)

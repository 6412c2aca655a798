"""Application service: Save Reservation Lines use case.

Replaces the whole line set of a reservation, but only if every proposed
quantity fits in what other overlapping reservations leave free.

Check and write happen in one unit of work, after the reservation and
every involved item have been locked, so a concurrent save over the same
items either waits for this one or fails with a ConcurrencyConflictError
and is retried from a fresh read.  A rejected proposal writes nothing.
"""

from __future__ import annotations

import logging

from menaje.application.dto import LineSpec, ReservationDTO, reservation_to_dto
from menaje.application.retry import DEFAULT_MAX_RETRIES, retry_on_conflict
from menaje.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    ValidationError,
)
from menaje.domain.model.policies import CommitmentPolicy
from menaje.domain.model.reservation import ReservationLine
from menaje.domain.model.value_objects import Quantity
from menaje.domain.repository.unit_of_work import UnitOfWork
from menaje.domain.service.availability_calculator import AvailabilityCalculator
from menaje.domain.service.overlap_guard import OverlapGuard

logger = logging.getLogger(__name__)


class SaveReservationLinesHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        policy: CommitmentPolicy,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ) -> None:
        self._uow = uow
        self._policy = policy
        self._max_retries = max_retries

    def handle(self, reservation_id: int, proposed: list[LineSpec]) -> ReservationDTO:
        """Validate and store *proposed* as the reservation's full line set.

        Raises:
            EntityNotFoundError: the reservation or an item does not exist.
            InsufficientStockError: one or more lines overbook; nothing saved.
            ValidationError: negative quantity, repeated item, inactive item
                or a returned/cancelled reservation.
            ConcurrencyConflictError: still conflicting after the retries.
        """
        lines = [ReservationLine(spec.menaje_id, Quantity(spec.cantidad)) for spec in proposed]
        return retry_on_conflict(
            lambda: self._save(reservation_id, lines),
            self._max_retries,
            f"Saving reservation #{reservation_id}",
        )

    def _save(self, reservation_id: int, lines: list[ReservationLine]) -> ReservationDTO:
        with self._uow:
            reservation = self._uow.reservations.get_by_id(reservation_id, lock=True)
            if reservation is None:
                raise EntityNotFoundError(f"Reservation #{reservation_id} not found")
            reservation.validate_lines(lines)

            wanted_ids = sorted(line.menaje_id for line in lines if not line.cantidad.is_zero)
            items = self._uow.catalog.get_many(wanted_ids, lock=True)
            missing = [item_id for item_id in wanted_ids if item_id not in items]
            if missing:
                raise EntityNotFoundError(
                    f"Item(s) not found: {', '.join(f'#{i}' for i in missing)}"
                )
            self._check_active(reservation.item_ids, items)

            if self._policy.commits(reservation.estado):
                guard = OverlapGuard(
                    AvailabilityCalculator(self._uow.catalog, self._uow.reservations, self._policy)
                )
                try:
                    guard.ensure_available(reservation, lines, items)
                except InsufficientStockError as exc:
                    logger.info("Rejected lines for reservation #%s: %s", reservation_id, exc)
                    raise

            reservation.replace_lines(lines)
            self._uow.reservations.save(reservation)
            self._uow.commit()

        logger.info(
            "Saved %d line(s) for reservation #%s (%s)",
            len(reservation.lines),
            reservation_id,
            reservation.window,
        )
        return reservation_to_dto(reservation, items)

    @staticmethod
    def _check_active(current_ids: set[int], items) -> None:
        """Inactive items may stay on a reservation but cannot be newly added."""
        for item in items.values():
            if not item.activo and item.id not in current_ids:
                raise ValidationError(f"Item '{item.nombre}' is no longer offered")

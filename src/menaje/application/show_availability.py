"""Application service: Show Availability use case (query)."""

from __future__ import annotations

from menaje.application.dto import AvailabilityLineDTO, availability_to_dto
from menaje.domain.exceptions import EntityNotFoundError
from menaje.domain.model.policies import CommitmentPolicy
from menaje.domain.model.value_objects import DateRange
from menaje.domain.repository.unit_of_work import UnitOfWork
from menaje.domain.service.availability_calculator import AvailabilityCalculator


class ShowAvailabilityHandler:

    def __init__(self, uow: UnitOfWork, policy: CommitmentPolicy) -> None:
        self._uow = uow
        self._policy = policy

    def handle(
        self,
        window: DateRange,
        exclude_reservation: int | None = None,
    ) -> list[AvailabilityLineDTO]:
        """Availability of every active item for *window*, by category and name.

        Pass *exclude_reservation* when the figures are meant for editing
        that reservation: its own lines are then treated as free, and
        inactive items it still holds are reported too.
        """
        with self._uow:
            held: set[int] = set()
            if exclude_reservation is not None:
                reservation = self._uow.reservations.get_by_id(exclude_reservation)
                if reservation is None:
                    raise EntityNotFoundError(f"Reservation #{exclude_reservation} not found")
                held = reservation.item_ids
            items = [
                item for item in self._uow.catalog.list_all() if item.activo or item.id in held
            ]
            calculator = AvailabilityCalculator(
                self._uow.catalog, self._uow.reservations, self._policy
            )
            figures = calculator.availability(
                window, exclude_reservation=exclude_reservation, items=items
            )
        return [availability_to_dto(item, figures[item.id]) for item in items]

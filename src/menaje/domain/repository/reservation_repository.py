"""Abstract repository for the Reservation aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Collection

from menaje.domain.model.reservation import Reservation, ReservationState
from menaje.domain.model.value_objects import DateRange


class ReservationRepository(ABC):

    @abstractmethod
    def get_by_id(self, reservation_id: int, *, lock: bool = False) -> Reservation | None:
        """Return a reservation with its lines, or None if not found."""

    @abstractmethod
    def get_by_evento(self, evento_id: str) -> Reservation | None:
        """Return the reservation owned by an event, or None."""

    @abstractmethod
    def add(self, reservation: Reservation) -> None:
        """Insert a new reservation and assign its ``id``.

        Raises DuplicateEntityError if the event already has one.
        """

    @abstractmethod
    def save(self, reservation: Reservation) -> None:
        """Persist state, notes and the full line set of a reservation."""

    @abstractmethod
    def committed_quantities(
        self,
        window: DateRange,
        *,
        exclude_reservation: int | None,
        states: Collection[ReservationState],
        item_ids: Collection[int] | None = None,
    ) -> dict[int, int]:
        """Sum line quantities per item over reservations overlapping *window*.

        Only reservations whose state is in *states* count, and
        *exclude_reservation* (if given) never counts.  Items with nothing
        committed are absent from the result.
        """

    @abstractmethod
    def list_overlapping(
        self,
        window: DateRange,
        states: Collection[ReservationState] | None = None,
    ) -> list[Reservation]:
        """Reservations whose window shares at least one day with *window*."""

    @abstractmethod
    def list_within(
        self,
        window: DateRange,
        states: Collection[ReservationState] | None = None,
    ) -> list[Reservation]:
        """Reservations whose window lies entirely inside *window*, by start date."""

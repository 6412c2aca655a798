"""Domain service: Availability Calculator.

Answers "how many units of each item are still free between these two
dates?" by subtracting what other overlapping, stock-holding reservations
already hold from each item's physical stock.  Pure read.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date

from menaje.domain.model.availability import ItemAvailability
from menaje.domain.model.inventory import InventoryItem
from menaje.domain.model.policies import CommitmentPolicy
from menaje.domain.model.value_objects import DateRange
from menaje.domain.repository.catalog_repository import CatalogRepository
from menaje.domain.repository.reservation_repository import ReservationRepository

logger = logging.getLogger(__name__)


class AvailabilityCalculator:

    def __init__(
        self,
        catalog_repo: CatalogRepository,
        reservation_repo: ReservationRepository,
        policy: CommitmentPolicy,
    ) -> None:
        self._catalog_repo = catalog_repo
        self._reservation_repo = reservation_repo
        self._policy = policy

    def availability(
        self,
        window: DateRange,
        *,
        exclude_reservation: int | None,
        items: Iterable[InventoryItem] | None = None,
    ) -> dict[int, ItemAvailability]:
        """Compute availability per item for *window*.

        ``exclude_reservation`` is mandatory on purpose: a caller editing a
        reservation must pass its id so the reservation's own lines do not
        count against itself; everyone else passes ``None``.

        If *items* is omitted every active catalog item is reported.
        """
        if items is None:
            items = [item for item in self._catalog_repo.list_all() if item.activo]
        items = list(items)

        reserved = self._reservation_repo.committed_quantities(
            window,
            exclude_reservation=exclude_reservation,
            states=self._policy.committing_states,
            item_ids=[item.id for item in items],
        )

        result: dict[int, ItemAvailability] = {}
        for item in items:
            entry = ItemAvailability(
                menaje_id=item.id,
                stock_total=item.stock_total,
                reservado=reserved.get(item.id, 0),
            )
            if entry.is_overcommitted:
                logger.warning(
                    "Item %s (%s) is over-committed in %s: stock=%d reserved=%d",
                    item.id,
                    item.nombre,
                    window,
                    entry.stock_total,
                    entry.reservado,
                )
            result[item.id] = entry
        return result

    def peak_commitment(self, item_id: int, since: date) -> int:
        """Highest number of units of one item held on any single day from *since* on.

        Sweeps the start/end points of every stock-holding reservation that
        includes the item.
        """
        horizon = DateRange(since, date.max)
        reservations = self._reservation_repo.list_overlapping(
            horizon, self._policy.committing_states
        )

        points: list[tuple[date, int]] = []
        for reservation in reservations:
            qty = reservation.quantity_of(item_id)
            if qty <= 0:
                continue
            start = max(reservation.window.start, since)
            points.append((start, qty))
            points.append((reservation.window.end, -qty))

        # Ends are inclusive, so on a shared day openings are counted first.
        points.sort(key=lambda p: (p[0], 0 if p[1] > 0 else 1))

        current = peak = 0
        for _, delta in points:
            current += delta
            peak = max(peak, current)
        return peak

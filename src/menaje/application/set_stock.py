"""Application service: Set Stock use case.

Records a new physical count for an item.  Existing reservations are
never rewritten; if the new count is below what reservations already
hold on some upcoming day, the change is kept and a warning is logged so
someone can resolve the shortfall by hand.
"""

from __future__ import annotations

import logging
from datetime import date

from menaje.application.dto import InventoryItemDTO, item_to_dto
from menaje.domain.exceptions import EntityNotFoundError
from menaje.domain.model.policies import CommitmentPolicy
from menaje.domain.repository.unit_of_work import UnitOfWork
from menaje.domain.service.availability_calculator import AvailabilityCalculator

logger = logging.getLogger(__name__)


class SetStockHandler:

    def __init__(self, uow: UnitOfWork, policy: CommitmentPolicy) -> None:
        self._uow = uow
        self._policy = policy

    def handle(self, item_id: int, stock_total: int, today: date | None = None) -> InventoryItemDTO:
        today = today or date.today()
        with self._uow:
            found = self._uow.catalog.get_many([item_id], lock=True)
            item = found.get(item_id)
            if item is None:
                raise EntityNotFoundError(f"Item #{item_id} not found")

            item.set_stock(stock_total)
            self._uow.catalog.save(item)

            calculator = AvailabilityCalculator(
                self._uow.catalog, self._uow.reservations, self._policy
            )
            peak = calculator.peak_commitment(item_id, since=today)
            self._uow.commit()

        if peak > stock_total:
            logger.warning(
                "Stock of %s lowered to %d but %d units are already reserved on one upcoming day",
                item.nombre,
                stock_total,
                peak,
            )
        else:
            logger.info("Stock of %s set to %d", item.nombre, stock_total)
        return item_to_dto(item)

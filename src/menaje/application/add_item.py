"""Application service: Add Catalog Item use case."""

from __future__ import annotations

import logging

from menaje.application.dto import InventoryItemDTO, item_to_dto
from menaje.domain.exceptions import ValidationError
from menaje.domain.model.inventory import InventoryItem, Unidad
from menaje.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class AddItemHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        nombre: str,
        unidad: str,
        stock_total: int,
        categoria: str = "general",
    ) -> InventoryItemDTO:
        """Add a new rentable item to the catalog."""
        if not nombre or not nombre.strip():
            raise ValidationError("Item name is required")

        item = InventoryItem(
            id=None,
            nombre=nombre.strip(),
            unidad=Unidad.from_code(unidad),
            stock_total=stock_total,
            categoria=(categoria or "general").strip().lower(),
        )

        with self._uow:
            if self._uow.catalog.get_by_name(item.nombre) is not None:
                raise ValidationError(f"Item '{item.nombre}' already exists")
            self._uow.catalog.save(item)
            self._uow.commit()

        logger.info("Added catalog item %s (%s), stock=%d", item.id, item.nombre, item.stock_total)
        return item_to_dto(item)

"""Application service: Update Catalog Item use case.

Edits the descriptive fields of an item and switches it on or off.  An
inactive item is no longer offered for new reservation lines; lines that
already hold it are left alone.  Stock has its own use case (set_stock).
"""

from __future__ import annotations

import logging

from menaje.application.dto import InventoryItemDTO, item_to_dto
from menaje.domain.exceptions import EntityNotFoundError, ValidationError
from menaje.domain.model.inventory import Unidad
from menaje.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class UpdateItemHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        item_id: int,
        *,
        nombre: str | None = None,
        categoria: str | None = None,
        unidad: str | None = None,
        activo: bool | None = None,
    ) -> InventoryItemDTO:
        """Apply the fields that are not None; the rest keep their value."""
        with self._uow:
            item = self._uow.catalog.get_by_id(item_id)
            if item is None:
                raise EntityNotFoundError(f"Item #{item_id} not found")

            if nombre is not None:
                item.rename(nombre)
                clash = self._uow.catalog.get_by_name(item.nombre)
                if clash is not None and clash.id != item.id:
                    raise ValidationError(f"Item '{item.nombre}' already exists")
            if categoria is not None:
                item.categoria = categoria.strip().lower() or "general"
            if unidad is not None:
                item.unidad = Unidad.from_code(unidad)
            if activo is not None:
                item.activo = activo

            self._uow.catalog.save(item)
            self._uow.commit()

        logger.info(
            "Updated catalog item %s (%s)%s",
            item.id,
            item.nombre,
            "" if item.activo else ", inactive",
        )
        return item_to_dto(item)

"""Application service: List Catalog Items use case (query)."""

from __future__ import annotations

from menaje.application.dto import InventoryItemDTO, item_to_dto
from menaje.domain.repository.unit_of_work import UnitOfWork


class ListItemsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, include_inactive: bool = False) -> list[InventoryItemDTO]:
        with self._uow:
            items = self._uow.catalog.list_all()
        return [item_to_dto(item) for item in items if include_inactive or item.activo]

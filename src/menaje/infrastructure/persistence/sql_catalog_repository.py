"""SQLAlchemy-backed implementation of CatalogRepository."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from menaje.domain.exceptions import DuplicateEntityError
from menaje.domain.model.inventory import InventoryItem, Unidad
from menaje.domain.repository.catalog_repository import CatalogRepository
from menaje.infrastructure.persistence.orm import MenajeRow


class SqlCatalogRepository(CatalogRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- CatalogRepository interface ------------------------------------------

    def get_by_id(self, item_id: int) -> InventoryItem | None:
        row = self._session.get(MenajeRow, item_id)
        return self._to_domain(row) if row is not None else None

    def get_by_name(self, nombre: str) -> InventoryItem | None:
        stmt = select(MenajeRow).where(func.lower(MenajeRow.nombre) == nombre.strip().lower())
        row = self._session.scalars(stmt).first()
        return self._to_domain(row) if row is not None else None

    def get_many(self, item_ids: Iterable[int], *, lock: bool = False) -> dict[int, InventoryItem]:
        ids = sorted(set(item_ids))
        if not ids:
            return {}
        # Fixed lock order (by id) so two savers cannot deadlock each other
        stmt = select(MenajeRow).where(MenajeRow.id.in_(ids)).order_by(MenajeRow.id)
        if lock:
            stmt = stmt.with_for_update()
        return {row.id: self._to_domain(row) for row in self._session.scalars(stmt)}

    def list_all(self) -> list[InventoryItem]:
        stmt = select(MenajeRow).order_by(MenajeRow.categoria, MenajeRow.nombre)
        return [self._to_domain(row) for row in self._session.scalars(stmt)]

    def save(self, item: InventoryItem) -> None:
        row = self._session.get(MenajeRow, item.id) if item.id is not None else None
        if row is None:
            row = MenajeRow()
            self._session.add(row)
        row.nombre = item.nombre
        row.categoria = item.categoria
        row.unidad = item.unidad.code
        row.stock_total = item.stock_total
        row.activo = item.activo
        try:
            self._session.flush()
        except IntegrityError as exc:
            raise DuplicateEntityError(f"Item '{item.nombre}' already exists") from exc
        item.id = row.id

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_domain(row: MenajeRow) -> InventoryItem:
        return InventoryItem(
            id=row.id,
            nombre=row.nombre,
            unidad=Unidad.from_code(row.unidad),
            stock_total=row.stock_total,
            categoria=row.categoria,
            activo=row.activo,
        )

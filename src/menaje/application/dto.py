"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from menaje.domain.model.availability import ItemAvailability
from menaje.domain.model.inventory import InventoryItem
from menaje.domain.model.reservation import Reservation


@dataclass(frozen=True)
class LineSpec:
    """Input: one proposed reservation line (item id + quantity)."""

    menaje_id: int
    cantidad: int


@dataclass(frozen=True)
class InventoryItemDTO:
    id: int
    nombre: str
    categoria: str
    unidad: str
    stock_total: int
    activo: bool


@dataclass(frozen=True)
class ReservationLineDTO:
    """Output: a line joined with its catalog item."""

    menaje_id: int
    nombre: str
    unidad: str
    cantidad: int
    cantidad_label: str  # e.g. "12 juegos"
    merma: int = 0


@dataclass(frozen=True)
class ReservationDTO:
    id: int
    evento_id: str
    fecha_inicio: date
    fecha_fin: date
    estado: str
    lines: list[ReservationLineDTO]
    notas: str | None
    created_at: str

    @property
    def total_units(self) -> int:
        return sum(line.cantidad for line in self.lines)


@dataclass(frozen=True)
class AvailabilityLineDTO:
    menaje_id: int
    nombre: str
    categoria: str
    unidad: str
    stock_total: int
    reservado: int
    disponible: int
    activo: bool = True


# --- Mapping ------------------------------------------------------------------


def item_to_dto(item: InventoryItem) -> InventoryItemDTO:
    return InventoryItemDTO(
        id=item.id,  # type: ignore[arg-type]
        nombre=item.nombre,
        categoria=item.categoria,
        unidad=item.unidad.code,
        stock_total=item.stock_total,
        activo=item.activo,
    )


def reservation_to_dto(
    reservation: Reservation, items: dict[int, InventoryItem]
) -> ReservationDTO:
    """Map a reservation; *items* must contain every item its lines reference."""
    lines = []
    for line in reservation.lines:
        item = items[line.menaje_id]
        lines.append(
            ReservationLineDTO(
                menaje_id=line.menaje_id,
                nombre=item.nombre,
                unidad=item.unidad.code,
                cantidad=line.cantidad.value,
                cantidad_label=item.format_quantity(line.cantidad.value),
                merma=line.merma,
            )
        )
    lines.sort(key=lambda line: line.nombre.lower())
    return ReservationDTO(
        id=reservation.id,  # type: ignore[arg-type]
        evento_id=reservation.evento_id,
        fecha_inicio=reservation.window.start,
        fecha_fin=reservation.window.end,
        estado=reservation.estado.value,
        lines=lines,
        notas=reservation.notas,
        created_at=reservation.created_at.strftime("%Y-%m-%d %H:%M UTC"),
    )


def availability_to_dto(item: InventoryItem, entry: ItemAvailability) -> AvailabilityLineDTO:
    return AvailabilityLineDTO(
        menaje_id=entry.menaje_id,
        nombre=item.nombre,
        categoria=item.categoria,
        unidad=item.unidad.code,
        stock_total=entry.stock_total,
        reservado=entry.reservado,
        disponible=entry.disponible,
        activo=item.activo,
    )

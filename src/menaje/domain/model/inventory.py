"""InventoryItem — a rentable catalog entry with finite physical stock.

The engine only reads items; stock is adjusted by catalog administration.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from menaje.domain.exceptions import ValidationError


class Unidad(Enum):
    """Units of measure an item is counted in.

    Each member carries its singular and plural display labels.
    """

    UNIDAD = ("unidad", "unidades")
    JUEGO = ("juego", "juegos")
    PAR = ("par", "pares")
    DOCENA = ("docena", "docenas")
    METRO = ("metro", "metros")
    CAJA = ("caja", "cajas")

    def __init__(self, singular: str, plural: str) -> None:
        self.singular = singular
        self.plural = plural

    @property
    def code(self) -> str:
        return self.singular

    def format(self, cantidad: int) -> str:
        label = self.singular if cantidad == 1 else self.plural
        return f"{cantidad} {label}"

    @classmethod
    def from_code(cls, code: str) -> Unidad:
        normalized = (code or "").strip().lower()
        for unidad in cls:
            if normalized in (unidad.singular, unidad.plural):
                return unidad
        valid = ", ".join(u.singular for u in cls)
        raise ValidationError(f"Unknown unit '{code}' (expected one of: {valid})")


@dataclass
class InventoryItem:
    """A rentable item (tableware, furniture, equipment).

    Invariants:
    - ``stock_total`` is never negative
    - ``nombre`` is never blank
    """

    id: int | None
    nombre: str
    unidad: Unidad
    stock_total: int
    categoria: str = "general"
    activo: bool = True

    def __post_init__(self) -> None:
        if not self.nombre or not self.nombre.strip():
            raise ValidationError("Item name is required")
        self._check_stock(self.stock_total)

    def set_stock(self, stock_total: int) -> None:
        """Record a new physical stock count."""
        self._check_stock(stock_total)
        self.stock_total = stock_total

    def rename(self, nombre: str) -> None:
        if not nombre or not nombre.strip():
            raise ValidationError("Item name is required")
        self.nombre = nombre.strip()

    def format_quantity(self, cantidad: int) -> str:
        return self.unidad.format(cantidad)

    @staticmethod
    def _check_stock(stock_total: int) -> None:
        if isinstance(stock_total, bool) or not isinstance(stock_total, int):
            raise ValidationError("Stock must be an integer")
        if stock_total < 0:
            raise ValidationError("Stock cannot be negative")

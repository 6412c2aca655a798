"""Per-item availability figures for a date window."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ItemAvailability:
    """How much of one item is free in a window.

    ``disponible`` is clamped at zero; ``raw_disponible`` keeps the
    unclamped value so an over-committed item can be detected.
    """

    menaje_id: int
    stock_total: int
    reservado: int

    @property
    def raw_disponible(self) -> int:
        return self.stock_total - self.reservado

    @property
    def disponible(self) -> int:
        return max(0, self.raw_disponible)

    @property
    def is_overcommitted(self) -> bool:
        return self.raw_disponible < 0

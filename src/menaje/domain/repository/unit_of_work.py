"""Abstract Unit of Work — the transaction boundary of the engine.

Every use case opens one unit of work, reads and writes through its
repositories, and either commits or lets it roll back.  Leaving the
``with`` block without ``commit()`` discards every change.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from menaje.domain.repository.catalog_repository import CatalogRepository
from menaje.domain.repository.reservation_repository import ReservationRepository


class UnitOfWork(ABC):

    catalog: CatalogRepository
    reservations: ReservationRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Make every change of this unit of work durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard uncommitted changes.  Safe to call after ``commit()``."""

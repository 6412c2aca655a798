"""Abstract repository for the rentable-item catalog.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (SQL, in-memory) live in the
infrastructure layer and in the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from menaje.domain.model.inventory import InventoryItem


class CatalogRepository(ABC):

    @abstractmethod
    def get_by_id(self, item_id: int) -> InventoryItem | None:
        """Return an item by its ID, or None if not found."""

    @abstractmethod
    def get_by_name(self, nombre: str) -> InventoryItem | None:
        """Return an item by name (case-insensitive), or None if not found."""

    @abstractmethod
    def get_many(self, item_ids: Iterable[int], *, lock: bool = False) -> dict[int, InventoryItem]:
        """Return the items that exist among *item_ids*, keyed by ID.

        With ``lock=True`` the rows stay locked until the surrounding
        transaction ends, so concurrent stock checks on the same items
        serialise.
        """

    @abstractmethod
    def list_all(self) -> list[InventoryItem]:
        """Return every item, ordered by category then name."""

    @abstractmethod
    def save(self, item: InventoryItem) -> None:
        """Persist a new or updated item (assigns ``id`` on insert).

        Raises DuplicateEntityError if another item already has the name.
        """

"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""

from __future__ import annotations

from dataclasses import dataclass


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class DuplicateEntityError(DomainException):
    """A uniqueness constraint rejected a new record."""


class ConcurrencyConflictError(DomainException):
    """The transaction could not be serialized against a concurrent one.

    Safe to retry with a fresh read.
    """


@dataclass(frozen=True)
class StockViolation:
    """One overbooked line: what was asked for versus what is free."""

    item_id: int
    nombre: str
    requested: int
    available: int

    def __str__(self) -> str:
        return f"{self.nombre}: requested={self.requested}, available={self.available}"


class InsufficientStockError(ValidationError):
    """The overbooking guard rejected a proposed line set."""

    def __init__(self, violations: list[StockViolation]) -> None:
        self.violations = list(violations)
        detail = "; ".join(str(v) for v in self.violations)
        super().__init__(f"Insufficient stock ({detail})")

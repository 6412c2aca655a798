"""SQLAlchemy-backed implementation of UnitOfWork.

One unit of work is one session and one database transaction.  Driver
errors that mean "another transaction got in the way" are translated
into ConcurrencyConflictError on the way out, so the application layer
can retry without knowing which database is underneath.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.orm import Session, sessionmaker

from menaje.domain.exceptions import ConcurrencyConflictError
from menaje.domain.repository.unit_of_work import UnitOfWork
from menaje.infrastructure.persistence.sql_catalog_repository import SqlCatalogRepository
from menaje.infrastructure.persistence.sql_reservation_repository import (
    SqlReservationRepository,
)

logger = logging.getLogger(__name__)

# serialization_failure, deadlock_detected, lock_not_available
_PG_CONFLICT_CODES = {"40001", "40P01", "55P03"}
_SQLITE_CONFLICT_MESSAGES = ("database is locked", "database table is locked")


def is_conflict(exc: BaseException) -> bool:
    """True if *exc* is a driver error that a fresh retry can resolve."""
    if not isinstance(exc, DBAPIError):
        return False
    orig = exc.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code in _PG_CONFLICT_CODES:
        return True
    if isinstance(exc, OperationalError):
        message = str(orig).lower()
        return any(text in message for text in _SQLITE_CONFLICT_MESSAGES)
    return False


class SqlUnitOfWork(UnitOfWork):

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory
        self._session: Session | None = None

    def __enter__(self) -> SqlUnitOfWork:
        self._session = self._session_factory()
        self.catalog = SqlCatalogRepository(self._session)
        self.reservations = SqlReservationRepository(self._session)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.rollback()
        finally:
            self._session.close()
            self._session = None
        if exc is not None and is_conflict(exc):
            logger.debug("Translating driver error into a concurrency conflict: %s", exc)
            raise ConcurrencyConflictError(
                "The reservation data changed while saving; please try again"
            ) from exc

    def commit(self) -> None:
        self._session.commit()

    def rollback(self) -> None:
        if self._session is not None:
            self._session.rollback()

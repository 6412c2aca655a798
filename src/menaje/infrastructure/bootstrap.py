"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache

from sqlalchemy import Engine
from sqlalchemy.orm import sessionmaker

from menaje.domain.model.policies import CommitmentPolicy, WindowPolicy
from menaje.infrastructure.config import settings
from menaje.infrastructure.persistence.database import (
    build_engine,
    build_session_factory,
)
from menaje.infrastructure.persistence.sql_unit_of_work import SqlUnitOfWork


@lru_cache(maxsize=None)
def engine() -> Engine:
    return build_engine(settings.database_url, echo=settings.database_echo)


@lru_cache(maxsize=None)
def session_factory() -> sessionmaker:
    return build_session_factory(engine())


def unit_of_work() -> SqlUnitOfWork:
    """A fresh unit of work; not shared between threads."""
    return SqlUnitOfWork(session_factory())


def window_policy() -> WindowPolicy:
    return WindowPolicy(
        setup_days=settings.setup_days,
        teardown_days=settings.teardown_days,
    )


def commitment_policy() -> CommitmentPolicy:
    return CommitmentPolicy(drafts_commit_stock=settings.drafts_commit_stock)


def max_retries() -> int:
    return settings.save_max_retries

"""Bounded retry for operations that lost a serialization race."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from menaje.domain.exceptions import ConcurrencyConflictError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 3


def retry_on_conflict(
    operation: Callable[[], T],
    max_retries: int = DEFAULT_MAX_RETRIES,
    description: str = "operation",
) -> T:
    """Run *operation*, re-running it after a ConcurrencyConflictError.

    The operation must open its own transaction so every attempt starts
    from a fresh read.  After *max_retries* extra attempts the last
    conflict propagates to the caller.
    """
    attempt = 0
    while True:
        try:
            return operation()
        except ConcurrencyConflictError:
            if attempt >= max_retries:
                logger.error("%s still conflicting after %d retries", description, attempt)
                raise
            attempt += 1
            logger.warning("%s hit a concurrency conflict, retry %d/%d", description, attempt, max_retries)

"""Named policy decisions of the reservation engine.

Both are plain frozen dataclasses so they can be built from settings in the
composition root and passed explicitly to the services that need them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from menaje.domain.exceptions import ValidationError
from menaje.domain.model.reservation import ReservationState
from menaje.domain.model.value_objects import DateRange


@dataclass(frozen=True)
class WindowPolicy:
    """How an event's single date becomes a reservation window.

    ``setup_days`` are added before the event (delivery and assembly),
    ``teardown_days`` after it (pickup).  Both default to zero: the
    reservation covers the event day only.
    """

    setup_days: int = 0
    teardown_days: int = 0

    def __post_init__(self) -> None:
        if self.setup_days < 0 or self.teardown_days < 0:
            raise ValidationError("Setup/teardown buffers cannot be negative")

    def window_for(self, evento_fecha: date) -> DateRange:
        return DateRange(
            evento_fecha - timedelta(days=self.setup_days),
            evento_fecha + timedelta(days=self.teardown_days),
        )


@dataclass(frozen=True)
class CommitmentPolicy:
    """Which reservation states hold stock.

    Confirmed reservations always commit.  Drafts commit by default so an
    event being planned cannot lose its items to a later booking; set
    ``drafts_commit_stock=False`` to treat drafts as exploratory.
    Returned and cancelled reservations never commit.
    """

    drafts_commit_stock: bool = True

    @property
    def committing_states(self) -> frozenset[ReservationState]:
        if self.drafts_commit_stock:
            return frozenset({ReservationState.BORRADOR, ReservationState.CONFIRMADO})
        return frozenset({ReservationState.CONFIRMADO})

    def commits(self, estado: ReservationState) -> bool:
        return estado in self.committing_states

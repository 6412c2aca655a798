"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from menaje.domain.exceptions import ValidationError


@dataclass(frozen=True)
class DateRange:
    """Inclusive window of calendar days ``[start, end]``.

    Both ends count: a reservation for Jan 10-12 holds the stock on the
    10th, 11th and 12th.
    """

    start: date
    end: date

    def __post_init__(self) -> None:
        if not isinstance(self.start, date) or not isinstance(self.end, date):
            raise ValidationError("DateRange bounds must be dates")
        if self.start > self.end:
            raise ValidationError(
                f"Invalid date range: start {self.start} is after end {self.end}"
            )

    # --- Queries --------------------------------------------------------------

    def overlaps(self, other: DateRange) -> bool:
        """True if the two windows share at least one day.

        Sharing only a boundary day counts as overlapping.
        """
        return self.start <= other.end and other.start <= self.end

    def within(self, other: DateRange) -> bool:
        """True if this window lies entirely inside *other*."""
        return other.start <= self.start and self.end <= other.end

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        if self.start == self.end:
            return self.start.isoformat()
        return f"{self.start.isoformat()} .. {self.end.isoformat()}"

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def of(start: str | date, end: str | date | None = None) -> DateRange:
        """Build a range from ISO strings or dates; a single day if *end* is omitted."""
        start_day = _coerce_date(start)
        end_day = _coerce_date(end) if end is not None else start_day
        return DateRange(start_day, end_day)


@dataclass(frozen=True)
class Quantity:
    """A non-negative integer quantity of units.

    Zero is valid input (it means "drop this line") but is never stored.
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value < 0:
            raise ValidationError("Quantity cannot be negative")

    @property
    def is_zero(self) -> bool:
        return self.value == 0

    def __str__(self) -> str:
        return str(self.value)


def _coerce_date(value: str | date) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)") from exc

"""Integration tests for the SaveReservationLines use case."""

import pytest

from menaje.application.dto import LineSpec
from menaje.application.get_or_create_reservation import GetOrCreateReservationHandler
from menaje.application.read_reservation import ReadReservationHandler
from menaje.application.save_reservation_lines import SaveReservationLinesHandler
from menaje.application.show_availability import ShowAvailabilityHandler
from menaje.domain.exceptions import (
    ConcurrencyConflictError,
    EntityNotFoundError,
    InsufficientStockError,
    ValidationError,
)
from menaje.domain.model.inventory import InventoryItem, Unidad
from menaje.domain.model.policies import CommitmentPolicy, WindowPolicy
from menaje.domain.model.reservation import ReservationState
from menaje.domain.model.value_objects import DateRange
from tests.fakes import FakeUnitOfWork, seed_reservation

MESA = 1
SILLA = 2
MANTEL = 3


def _setup() -> FakeUnitOfWork:
    return FakeUnitOfWork(
        [
            InventoryItem(id=MESA, nombre="Mesa redonda", unidad=Unidad.UNIDAD, stock_total=20),
            InventoryItem(id=SILLA, nombre="Silla", unidad=Unidad.UNIDAD, stock_total=100),
            InventoryItem(id=MANTEL, nombre="Mantel", unidad=Unidad.JUEGO, stock_total=30),
        ]
    )


def _save(uow, reservation_id, lines: dict[int, int], policy=None):
    handler = SaveReservationLinesHandler(uow, policy or CommitmentPolicy())
    return handler.handle(reservation_id, [LineSpec(k, v) for k, v in lines.items()])


def _read_lines(uow, reservation_id) -> dict[int, int]:
    dto = ReadReservationHandler(uow).handle(reservation_id)
    return {line.menaje_id: line.cantidad for line in dto.lines}


class TestSaveHappyPath:

    def test_round_trip_drops_zero_lines(self):
        uow = _setup()
        r = GetOrCreateReservationHandler(uow, WindowPolicy()).handle("EV-1", "2024-01-10")

        _save(uow, r.id, {MESA: 10, SILLA: 0, MANTEL: 4})

        assert _read_lines(uow, r.id) == {MESA: 10, MANTEL: 4}
        assert uow.commits == 2

    def test_lines_replaced_wholesale(self):
        uow = _setup()
        r = seed_reservation(uow.reservations, "EV-1", "2024-01-10", lines={MESA: 10, SILLA: 50})

        _save(uow, r.id, {MANTEL: 2})

        assert _read_lines(uow, r.id) == {MANTEL: 2}

    def test_empty_set_clears_reservation(self):
        uow = _setup()
        r = seed_reservation(uow.reservations, "EV-1", "2024-01-10", lines={MESA: 10})

        dto = _save(uow, r.id, {})

        assert dto.lines == []
        assert _read_lines(uow, r.id) == {}

    def test_dto_carries_formatted_quantities(self):
        uow = _setup()
        r = seed_reservation(uow.reservations, "EV-1", "2024-01-10")

        dto = _save(uow, r.id, {MANTEL: 1, MESA: 3})

        labels = {line.nombre: line.cantidad_label for line in dto.lines}
        assert labels == {"Mantel": "1 juego", "Mesa redonda": "3 unidades"}
        assert dto.total_units == 4


class TestOverbookingScenario:
    """Mesa redonda: stock 20, A holds 15 on Jan 10-12, B asks on Jan 11-13."""

    def _scenario(self):
        uow = _setup()
        seed_reservation(uow.reservations, "A", "2024-01-10", "2024-01-12",
                         ReservationState.CONFIRMADO, {MESA: 15})
        b = seed_reservation(uow.reservations, "B", "2024-01-11", "2024-01-13")
        return uow, b

    def test_availability_reports_five_free(self):
        uow, b = self._scenario()
        lines = ShowAvailabilityHandler(uow, CommitmentPolicy()).handle(
            DateRange.of("2024-01-11", "2024-01-13"), exclude_reservation=b.id
        )
        mesa = next(line for line in lines if line.menaje_id == MESA)
        assert (mesa.stock_total, mesa.reservado, mesa.disponible) == (20, 15, 5)

    def test_six_rejected_then_five_accepted(self):
        uow, b = self._scenario()

        with pytest.raises(InsufficientStockError) as excinfo:
            _save(uow, b.id, {MESA: 6})
        [violation] = excinfo.value.violations
        assert (violation.nombre, violation.requested, violation.available) == ("Mesa redonda", 6, 5)

        _save(uow, b.id, {MESA: 5})
        assert _read_lines(uow, b.id) == {MESA: 5}

    def test_rejection_is_atomic(self):
        uow, b = self._scenario()
        _save(uow, b.id, {SILLA: 10, MANTEL: 2})

        with pytest.raises(InsufficientStockError):
            _save(uow, b.id, {SILLA: 40, MESA: 6, MANTEL: 8})

        assert _read_lines(uow, b.id) == {SILLA: 10, MANTEL: 2}

    def test_returned_reservation_frees_stock_for_save(self):
        uow = _setup()
        seed_reservation(uow.reservations, "A", "2024-01-10", "2024-01-12",
                         ReservationState.DEVUELTO, {MESA: 15})
        b = seed_reservation(uow.reservations, "B", "2024-01-11", "2024-01-13")

        _save(uow, b.id, {MESA: 20})

        assert _read_lines(uow, b.id) == {MESA: 20}


class TestSelfExclusion:

    def test_resaving_unchanged_lines_never_self_blocks(self):
        uow = _setup()
        a = seed_reservation(uow.reservations, "A", "2024-01-10", lines={MESA: 12})
        seed_reservation(uow.reservations, "B", "2024-01-10", lines={MESA: 8})

        lines = ShowAvailabilityHandler(uow, CommitmentPolicy()).handle(
            a.window, exclude_reservation=a.id
        )
        assert next(l for l in lines if l.menaje_id == MESA).disponible == 12

        _save(uow, a.id, {MESA: 12})
        assert _read_lines(uow, a.id) == {MESA: 12}

    def test_growing_own_line_only_limited_by_others(self):
        uow = _setup()
        a = seed_reservation(uow.reservations, "A", "2024-01-10", lines={MESA: 12})
        seed_reservation(uow.reservations, "B", "2024-01-10", lines={MESA: 5})

        _save(uow, a.id, {MESA: 15})

        with pytest.raises(InsufficientStockError):
            _save(uow, a.id, {MESA: 16})


class TestSaveValidation:

    def test_unknown_reservation(self):
        with pytest.raises(EntityNotFoundError, match="Reservation #99 not found"):
            _save(_setup(), 99, {MESA: 1})

    def test_unknown_item(self):
        uow = _setup()
        r = seed_reservation(uow.reservations, "EV-1", "2024-01-10")
        with pytest.raises(EntityNotFoundError, match="#42"):
            _save(uow, r.id, {42: 1})

    def test_negative_quantity(self):
        uow = _setup()
        r = seed_reservation(uow.reservations, "EV-1", "2024-01-10")
        with pytest.raises(ValidationError, match="cannot be negative"):
            _save(uow, r.id, {MESA: -1})

    def test_repeated_item(self):
        uow = _setup()
        r = seed_reservation(uow.reservations, "EV-1", "2024-01-10")
        handler = SaveReservationLinesHandler(uow, CommitmentPolicy())
        with pytest.raises(ValidationError, match="more than once"):
            handler.handle(r.id, [LineSpec(MESA, 1), LineSpec(MESA, 2)])

    def test_returned_reservation_is_read_only(self):
        uow = _setup()
        r = seed_reservation(uow.reservations, "EV-1", "2024-01-10",
                             estado=ReservationState.DEVUELTO, lines={MESA: 3})
        with pytest.raises(ValidationError, match="Cannot edit items"):
            _save(uow, r.id, {MESA: 1})
        assert _read_lines(uow, r.id) == {MESA: 3}

    def test_inactive_item_cannot_be_added_but_can_stay(self):
        uow = _setup()
        r = seed_reservation(uow.reservations, "EV-1", "2024-01-10", lines={MANTEL: 2})
        for item_id in (MESA, MANTEL):
            item = uow.catalog.get_by_id(item_id)
            item.activo = False
            uow.catalog.save(item)

        with pytest.raises(ValidationError, match="no longer offered"):
            _save(uow, r.id, {MESA: 1, MANTEL: 2})

        _save(uow, r.id, {MANTEL: 3})
        assert _read_lines(uow, r.id) == {MANTEL: 3}

    def test_drafts_not_checked_when_they_do_not_hold_stock(self):
        uow = _setup()
        seed_reservation(uow.reservations, "A", "2024-01-10",
                         estado=ReservationState.CONFIRMADO, lines={MESA: 20})
        b = seed_reservation(uow.reservations, "B", "2024-01-10")

        _save(uow, b.id, {MESA: 5}, policy=CommitmentPolicy(drafts_commit_stock=False))

        assert _read_lines(uow, b.id) == {MESA: 5}


class _ConflictingUnitOfWork(FakeUnitOfWork):
    """Fails the first *failures* commits as if a concurrent writer won."""

    def __init__(self, items, failures: int) -> None:
        super().__init__(items)
        self.failures = failures

    def commit(self) -> None:
        if self.failures > 0:
            self.failures -= 1
            raise ConcurrencyConflictError("serialization failure")
        super().commit()


class TestConcurrencyRetry:

    def _items(self):
        return [InventoryItem(id=MESA, nombre="Mesa redonda", unidad=Unidad.UNIDAD, stock_total=20)]

    def test_conflict_retried_until_success(self):
        uow = _ConflictingUnitOfWork(self._items(), failures=2)
        r = seed_reservation(uow.reservations, "EV-1", "2024-01-10")

        SaveReservationLinesHandler(uow, CommitmentPolicy(), max_retries=3).handle(
            r.id, [LineSpec(MESA, 4)]
        )

        assert _read_lines(uow, r.id) == {MESA: 4}
        assert uow.rollbacks >= 2

    def test_conflict_surfaces_after_retries(self):
        uow = _ConflictingUnitOfWork(self._items(), failures=10)
        r = seed_reservation(uow.reservations, "EV-1", "2024-01-10", lines={MESA: 1})

        with pytest.raises(ConcurrencyConflictError):
            SaveReservationLinesHandler(uow, CommitmentPolicy(), max_retries=2).handle(
                r.id, [LineSpec(MESA, 4)]
            )

        assert uow.failures == 7
        assert _read_lines(uow, r.id) == {MESA: 1}

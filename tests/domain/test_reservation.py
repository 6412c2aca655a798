"""Unit tests for the Reservation aggregate and its lifecycle."""

import pytest

from menaje.domain.exceptions import ValidationError
from menaje.domain.model.reservation import Reservation, ReservationLine, ReservationState
from menaje.domain.model.value_objects import DateRange, Quantity


def _line(menaje_id: int, qty: int) -> ReservationLine:
    return ReservationLine(menaje_id=menaje_id, cantidad=Quantity(qty))


def _reservation(estado: ReservationState = ReservationState.BORRADOR) -> Reservation:
    r = Reservation.open("EV-1", DateRange.of("2024-01-10", "2024-01-12"))
    r.id = 1
    r.estado = estado
    return r


class TestReservationOpen:

    def test_new_reservation_is_empty_draft(self):
        r = Reservation.open(" EV-9 ", DateRange.of("2024-03-01"))
        assert r.id is None
        assert r.evento_id == "EV-9"
        assert r.estado == ReservationState.BORRADOR
        assert r.lines == []

    def test_event_id_required(self):
        with pytest.raises(ValidationError, match="Event id is required"):
            Reservation.open("", DateRange.of("2024-03-01"))


class TestReplaceLines:

    def test_zero_quantity_lines_dropped(self):
        r = _reservation()
        r.replace_lines([_line(1, 5), _line(2, 0)])
        assert r.lines == [_line(1, 5)]
        assert r.quantity_of(2) == 0

    def test_replaces_wholesale(self):
        r = _reservation()
        r.replace_lines([_line(1, 5), _line(2, 3)])
        r.replace_lines([_line(3, 1)])
        assert r.item_ids == {3}

    def test_duplicate_item_rejected(self):
        r = _reservation()
        with pytest.raises(ValidationError, match="more than once"):
            r.replace_lines([_line(1, 5), _line(1, 2)])

    @pytest.mark.parametrize("estado", [ReservationState.DEVUELTO, ReservationState.CANCELADO])
    def test_terminal_reservation_not_editable(self, estado):
        r = _reservation(estado)
        with pytest.raises(ValidationError, match="Cannot edit items"):
            r.replace_lines([_line(1, 1)])

    def test_confirmed_reservation_still_editable(self):
        r = _reservation(ReservationState.CONFIRMADO)
        r.replace_lines([_line(1, 1)])
        assert r.quantity_of(1) == 1


class TestLifecycle:

    def test_draft_to_confirmed_to_returned(self):
        r = _reservation()
        r.replace_lines([_line(1, 15)])
        r.set_estado(ReservationState.CONFIRMADO)
        r.set_estado(ReservationState.DEVUELTO)
        assert r.estado == ReservationState.DEVUELTO
        # lines are kept as history
        assert r.quantity_of(1) == 15

    def test_confirmed_back_to_draft(self):
        r = _reservation(ReservationState.CONFIRMADO)
        r.set_estado(ReservationState.BORRADOR)
        assert r.estado == ReservationState.BORRADOR

    def test_same_state_is_noop(self):
        r = _reservation(ReservationState.DEVUELTO)
        r.set_estado(ReservationState.DEVUELTO)
        assert r.estado == ReservationState.DEVUELTO

    @pytest.mark.parametrize("target", [ReservationState.BORRADOR, ReservationState.CONFIRMADO])
    def test_returned_is_terminal(self, target):
        r = _reservation(ReservationState.DEVUELTO)
        with pytest.raises(ValidationError, match="from devuelto"):
            r.set_estado(target)

    def test_cancelled_is_terminal(self):
        r = _reservation(ReservationState.CANCELADO)
        with pytest.raises(ValidationError, match="from cancelado"):
            r.set_estado(ReservationState.DEVUELTO)

    def test_parse_state(self):
        assert ReservationState.parse("Confirmado") is ReservationState.CONFIRMADO
        with pytest.raises(ValidationError, match="Unknown state"):
            ReservationState.parse("archivado")


class TestRegisterReturn:

    def _with_lines(self, estado=ReservationState.CONFIRMADO):
        r = _reservation()
        r.replace_lines([_line(1, 15), _line(2, 4)])
        r.estado = estado
        return r

    def test_shrinkage_recorded_and_state_returned(self):
        r = self._with_lines()

        r.register_return({1: 2})

        assert r.estado == ReservationState.DEVUELTO
        mesa, mantel = sorted(r.lines, key=lambda line: line.menaje_id)
        assert (mesa.merma, mesa.devuelta) == (2, 13)
        assert (mantel.merma, mantel.devuelta) == (0, 4)

    def test_whole_line_may_be_lost(self):
        r = self._with_lines()
        r.register_return({2: 4})
        assert r.lines[1].devuelta == 0

    def test_shrinkage_above_reserved_rejected(self):
        r = self._with_lines()
        with pytest.raises(ValidationError, match="exceeds the 4 units reserved"):
            r.register_return({2: 5})
        assert r.estado == ReservationState.CONFIRMADO
        assert all(line.merma == 0 for line in r.lines)

    def test_item_not_on_reservation_rejected(self):
        r = self._with_lines()
        with pytest.raises(ValidationError, match="not on this reservation"):
            r.register_return({9: 1})

    def test_negative_shrinkage_rejected(self):
        r = self._with_lines()
        with pytest.raises(ValidationError, match="cannot be negative"):
            r.register_return({1: -1})

    @pytest.mark.parametrize("terminal", [ReservationState.DEVUELTO, ReservationState.CANCELADO])
    def test_closed_reservation_rejected(self, terminal):
        r = self._with_lines(terminal)
        with pytest.raises(ValidationError, match="Cannot register the return"):
            r.register_return({})


class TestNotes:

    def test_notes_trimmed(self):
        r = _reservation()
        r.set_notas("  entregar por la puerta lateral ")
        assert r.notas == "entregar por la puerta lateral"

    def test_blank_clears(self):
        r = _reservation()
        r.set_notas("algo")
        r.set_notas("   ")
        assert r.notas is None

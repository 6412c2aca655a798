"""SQLAlchemy-backed implementation of ReservationRepository."""

from __future__ import annotations

from collections.abc import Collection

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from menaje.domain.exceptions import DuplicateEntityError, EntityNotFoundError
from menaje.domain.model.reservation import Reservation, ReservationLine, ReservationState
from menaje.domain.model.value_objects import DateRange, Quantity
from menaje.domain.repository.reservation_repository import ReservationRepository
from menaje.infrastructure.persistence.orm import ReservaItemRow, ReservaRow


class SqlReservationRepository(ReservationRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- ReservationRepository interface --------------------------------------

    def get_by_id(self, reservation_id: int, *, lock: bool = False) -> Reservation | None:
        stmt = select(ReservaRow).where(ReservaRow.id == reservation_id)
        if lock:
            stmt = stmt.with_for_update()
        row = self._session.scalars(stmt.options(selectinload(ReservaRow.items))).first()
        return self._to_domain(row) if row is not None else None

    def get_by_evento(self, evento_id: str) -> Reservation | None:
        stmt = (
            select(ReservaRow)
            .where(ReservaRow.evento_id == evento_id)
            .options(selectinload(ReservaRow.items))
        )
        row = self._session.scalars(stmt).first()
        return self._to_domain(row) if row is not None else None

    def add(self, reservation: Reservation) -> None:
        row = ReservaRow(
            evento_id=reservation.evento_id,
            fecha_inicio=reservation.window.start,
            fecha_fin=reservation.window.end,
            estado=reservation.estado.value,
            notas=reservation.notas,
            created_at=reservation.created_at,
            updated_at=reservation.updated_at,
        )
        row.items = [
            ReservaItemRow(menaje_id=line.menaje_id, cantidad=line.cantidad.value, merma=line.merma)
            for line in reservation.lines
        ]
        self._session.add(row)
        try:
            self._session.flush()
        except IntegrityError as exc:
            raise DuplicateEntityError(
                f"Event {reservation.evento_id} already has a reservation"
            ) from exc
        reservation.id = row.id

    def save(self, reservation: Reservation) -> None:
        row = self._session.get(ReservaRow, reservation.id)
        if row is None:
            raise EntityNotFoundError(f"Reservation #{reservation.id} not found")

        row.estado = reservation.estado.value
        row.notas = reservation.notas
        row.updated_at = reservation.updated_at

        # Update rows in place: deleting and re-inserting the same item
        # within one flush would trip the (reserva_id, menaje_id) unique key.
        wanted = {line.menaje_id: line for line in reservation.lines}
        for item_row in list(row.items):
            line = wanted.pop(item_row.menaje_id, None)
            if line is None:
                row.items.remove(item_row)
                continue
            item_row.cantidad = line.cantidad.value
            item_row.merma = line.merma
        for line in wanted.values():
            row.items.append(
                ReservaItemRow(menaje_id=line.menaje_id, cantidad=line.cantidad.value, merma=line.merma)
            )
        self._session.flush()

    def committed_quantities(
        self,
        window: DateRange,
        *,
        exclude_reservation: int | None,
        states: Collection[ReservationState],
        item_ids: Collection[int] | None = None,
    ) -> dict[int, int]:
        if not states or (item_ids is not None and not item_ids):
            return {}

        stmt = (
            select(ReservaItemRow.menaje_id, func.sum(ReservaItemRow.cantidad))
            .join(ReservaRow, ReservaItemRow.reserva_id == ReservaRow.id)
            .where(
                ReservaRow.fecha_inicio <= window.end,
                ReservaRow.fecha_fin >= window.start,
                ReservaRow.estado.in_([s.value for s in states]),
            )
            .group_by(ReservaItemRow.menaje_id)
        )
        if exclude_reservation is not None:
            stmt = stmt.where(ReservaRow.id != exclude_reservation)
        if item_ids is not None:
            stmt = stmt.where(ReservaItemRow.menaje_id.in_(list(item_ids)))

        return {menaje_id: int(total) for menaje_id, total in self._session.execute(stmt)}

    def list_overlapping(
        self,
        window: DateRange,
        states: Collection[ReservationState] | None = None,
    ) -> list[Reservation]:
        stmt = select(ReservaRow).where(
            ReservaRow.fecha_inicio <= window.end,
            ReservaRow.fecha_fin >= window.start,
        )
        return self._list(stmt, states)

    def list_within(
        self,
        window: DateRange,
        states: Collection[ReservationState] | None = None,
    ) -> list[Reservation]:
        stmt = select(ReservaRow).where(
            ReservaRow.fecha_inicio >= window.start,
            ReservaRow.fecha_fin <= window.end,
        )
        return self._list(stmt, states)

    # --- Helpers --------------------------------------------------------------

    def _list(self, stmt, states: Collection[ReservationState] | None) -> list[Reservation]:
        if states is not None:
            stmt = stmt.where(ReservaRow.estado.in_([s.value for s in states]))
        stmt = stmt.order_by(ReservaRow.fecha_inicio, ReservaRow.id).options(
            selectinload(ReservaRow.items)
        )
        return [self._to_domain(row) for row in self._session.scalars(stmt)]

    @staticmethod
    def _to_domain(row: ReservaRow) -> Reservation:
        return Reservation(
            id=row.id,
            evento_id=row.evento_id,
            window=DateRange(row.fecha_inicio, row.fecha_fin),
            estado=ReservationState(row.estado),
            lines=[
                ReservationLine(
                    menaje_id=item.menaje_id,
                    cantidad=Quantity(item.cantidad),
                    merma=item.merma or 0,
                )
                for item in row.items
            ],
            notas=row.notas,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

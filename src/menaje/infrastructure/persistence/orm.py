"""Table definitions for the catalog and the reservations."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from menaje.infrastructure.persistence.database import Base


class MenajeRow(Base):
    __tablename__ = "menaje_catalogo"

    id = Column(Integer, primary_key=True, autoincrement=True)
    nombre = Column(String(200), nullable=False, unique=True)
    categoria = Column(String(100), nullable=False, default="general", index=True)
    unidad = Column(String(20), nullable=False, default="unidad")  # Unidad.code
    stock_total = Column(Integer, nullable=False, default=0)
    activo = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint("stock_total >= 0", name="ck_menaje_stock_total_non_negative"),
    )


class ReservaRow(Base):
    __tablename__ = "menaje_reservas"

    id = Column(Integer, primary_key=True, autoincrement=True)
    evento_id = Column(String(64), nullable=False, unique=True)  # one reservation per event
    fecha_inicio = Column(Date, nullable=False, index=True)
    fecha_fin = Column(Date, nullable=False, index=True)
    estado = Column(String(20), nullable=False, default="borrador", index=True)
    notas = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    items = relationship(
        "ReservaItemRow",
        back_populates="reserva",
        cascade="all, delete-orphan",
        order_by="ReservaItemRow.menaje_id",
    )

    __table_args__ = (
        CheckConstraint("fecha_inicio <= fecha_fin", name="ck_reserva_window_ordered"),
    )


class ReservaItemRow(Base):
    __tablename__ = "menaje_reserva_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    reserva_id = Column(
        Integer, ForeignKey("menaje_reservas.id", ondelete="CASCADE"), nullable=False, index=True
    )
    menaje_id = Column(
        Integer, ForeignKey("menaje_catalogo.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    cantidad = Column(Integer, nullable=False)
    merma = Column(Integer, nullable=False, default=0)  # units not returned

    reserva = relationship("ReservaRow", back_populates="items")
    menaje = relationship("MenajeRow")

    __table_args__ = (
        UniqueConstraint("reserva_id", "menaje_id", name="uq_reserva_item"),
        CheckConstraint("cantidad > 0", name="ck_reserva_item_cantidad_positive"),
        CheckConstraint("merma >= 0 AND merma <= cantidad", name="ck_reserva_item_merma_range"),
    )

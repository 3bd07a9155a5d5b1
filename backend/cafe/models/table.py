"""Seating models - cafe tables and reservations."""

from __future__ import annotations

from datetime import date, time
from enum import Enum
from typing import List, Optional

from sqlalchemy import Date, Enum as SQLEnum, ForeignKey, Integer, String, Text, Time
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from cafe.db.base import Base, TimestampMixin
from cafe.models.validators import enum_values, positive


class TableLocation(str, Enum):
    INDOOR = "indoor"
    OUTDOOR = "outdoor"
    VIP = "vip"
    BALCONY = "balcony"


class TableStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    RESERVED = "reserved"
    MAINTENANCE = "maintenance"


class ReservationStatus(str, Enum):
    CONFIRMED = "confirmed"
    PENDING = "pending"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    NO_SHOW = "no_show"


# Reservation statuses that hand the table back
RELEASING_STATUSES = {ReservationStatus.CANCELLED, ReservationStatus.COMPLETED}


class CafeTable(Base, TimestampMixin):
    """A physical table in the cafe."""

    __tablename__ = "cafe_tables"

    id: Mapped[int] = mapped_column(primary_key=True)
    table_number: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)
    seating_capacity: Mapped[int] = mapped_column(Integer, default=4, nullable=False)
    location: Mapped[TableLocation] = mapped_column(
        SQLEnum(TableLocation, name="table_location", values_callable=enum_values),
        default=TableLocation.INDOOR,
        nullable=False,
    )
    status: Mapped[TableStatus] = mapped_column(
        SQLEnum(TableStatus, name="table_status", values_callable=enum_values),
        default=TableStatus.AVAILABLE,
        nullable=False,
        index=True,
    )
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    reservations: Mapped[List["Reservation"]] = relationship(
        "Reservation",
        back_populates="table",
        order_by="Reservation.id",
        cascade="all, delete",
    )

    @validates("table_number", "seating_capacity")
    def _validate_positive(self, key, value):
        return positive(key, value)


class Reservation(Base, TimestampMixin):
    """A booking of one table for a party."""

    __tablename__ = "reservations"

    id: Mapped[int] = mapped_column(primary_key=True)
    reservation_number: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    table_id: Mapped[int] = mapped_column(ForeignKey("cafe_tables.id"), nullable=False, index=True)
    customer_name: Mapped[str] = mapped_column(String(100), nullable=False)
    customer_phone: Mapped[str] = mapped_column(String(15), nullable=False)
    customer_email: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    party_size: Mapped[int] = mapped_column(Integer, default=2, nullable=False)
    reservation_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    reservation_time: Mapped[time] = mapped_column(Time, nullable=False)
    duration: Mapped[int] = mapped_column(Integer, default=60, nullable=False)  # minutes
    status: Mapped[ReservationStatus] = mapped_column(
        SQLEnum(ReservationStatus, name="reservation_status", values_callable=enum_values),
        default=ReservationStatus.PENDING,
        nullable=False,
        index=True,
    )
    special_requests: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    table: Mapped["CafeTable"] = relationship("CafeTable", back_populates="reservations")

    @validates("party_size", "duration")
    def _validate_positive(self, key, value):
        return positive(key, value)

"""Cafe tables and reservations, including the table status side effects."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from cafe.core.config import Settings, get_settings
from cafe.core.errors import NotFoundError, ValidationError
from cafe.core.identifiers import RESERVATION_PREFIX, insert_with_business_number
from cafe.models.table import (
    RELEASING_STATUSES,
    CafeTable,
    Reservation,
    TableStatus,
)
from cafe.schemas.tables import ReservationCreate, TableCreate
from cafe.services.common import apply_changes, build, get_or_404

logger = logging.getLogger(__name__)

DUPLICATE_TABLE = "Table with this number already exists"


class TableService:
    """Table CRUD. Table numbers are unique."""

    def __init__(self, db: Session):
        self.db = db

    def list_tables(self, status: Optional[str] = None, location: Optional[str] = None) -> List[CafeTable]:
        query = self.db.query(CafeTable).options(selectinload(CafeTable.reservations))
        if status:
            query = query.filter(CafeTable.status == status)
        if location:
            query = query.filter(CafeTable.location == location)
        return query.order_by(CafeTable.table_number).all()

    def get_table(self, table_id: int) -> CafeTable:
        table = (
            self.db.query(CafeTable)
            .options(selectinload(CafeTable.reservations))
            .filter(CafeTable.id == table_id)
            .first()
        )
        if table is None:
            raise NotFoundError("Table")
        return table

    def create_table(self, data: TableCreate) -> CafeTable:
        self._ensure_unique_number(data.table_number)

        table = build(CafeTable, data.model_dump())
        self.db.add(table)
        self._commit_unique()

        logger.info(f"Table {table.table_number} created (ID: {table.id}, seats: {table.seating_capacity})")
        return self.get_table(table.id)

    def update_table(self, table_id: int, changes: Dict[str, Any]) -> CafeTable:
        table = get_or_404(self.db, CafeTable, table_id, "Table")

        new_number = changes.get("table_number")
        if new_number is not None and new_number != table.table_number:
            self._ensure_unique_number(new_number, exclude_id=table.id)

        apply_changes(table, changes)
        self._commit_unique()

        logger.info(f"Table {table.table_number} updated (ID: {table.id}, status: {table.status.value})")
        return self.get_table(table.id)

    def delete_table(self, table_id: int) -> None:
        table = get_or_404(self.db, CafeTable, table_id, "Table")
        number = table.table_number
        count = len(table.reservations)
        # Cascades to the reservations within this transaction
        self.db.delete(table)
        self.db.commit()
        logger.info(f"Table {number} deleted (ID: {table_id}, reservations removed: {count})")

    def _ensure_unique_number(self, table_number: int, exclude_id: Optional[int] = None) -> None:
        query = self.db.query(CafeTable.id).filter(CafeTable.table_number == table_number)
        if exclude_id is not None:
            query = query.filter(CafeTable.id != exclude_id)
        if query.first() is not None:
            raise ValidationError(DUPLICATE_TABLE)

    def _commit_unique(self) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ValidationError(DUPLICATE_TABLE)


class ReservationService:
    """Reservation CRUD.

    Side effects on the booked table, committed with the reservation write:

    - create: table becomes ``reserved`` whatever its prior status
    - update to ``cancelled`` or ``completed``: the table the reservation
      was on before the update becomes ``available``
    - delete: table becomes ``available``

    Party size is checked against seating capacity on create only.
    """

    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()

    def list_reservations(self, status: Optional[str] = None, reservation_date=None) -> List[Reservation]:
        query = self.db.query(Reservation).options(selectinload(Reservation.table))
        if status:
            query = query.filter(Reservation.status == status)
        if reservation_date is not None:
            query = query.filter(Reservation.reservation_date == reservation_date)
        return query.order_by(
            Reservation.reservation_date, Reservation.reservation_time, Reservation.id
        ).all()

    def get_reservation(self, reservation_id: int) -> Reservation:
        reservation = (
            self.db.query(Reservation)
            .options(selectinload(Reservation.table))
            .filter(Reservation.id == reservation_id)
            .first()
        )
        if reservation is None:
            raise NotFoundError("Reservation")
        return reservation

    def create_reservation(self, data: ReservationCreate) -> Reservation:
        reservation = build(Reservation, data.model_dump())
        insert_with_business_number(
            self.db,
            reservation,
            "reservation_number",
            RESERVATION_PREFIX,
            self.settings.business_number_attempts,
            before_insert=lambda: self._check_capacity(data.table_id, data.party_size),
        )
        # Locked by the last _check_capacity in this transaction
        table = self.db.get(CafeTable, data.table_id)
        table.status = TableStatus.RESERVED
        self.db.commit()

        logger.info(
            f"Reservation {reservation.reservation_number} created for table "
            f"{table.table_number} ({reservation.reservation_date} {reservation.reservation_time}, "
            f"party of {reservation.party_size})"
        )
        return self.get_reservation(reservation.id)

    def update_reservation(self, reservation_id: int, changes: Dict[str, Any]) -> Reservation:
        reservation = get_or_404(self.db, Reservation, reservation_id, "Reservation")
        previous_table_id = reservation.table_id

        new_table_id = changes.get("table_id")
        if new_table_id is not None and new_table_id != previous_table_id:
            self._lock_table(new_table_id)

        new_status = changes.get("status")
        if new_status in RELEASING_STATUSES:
            self._lock_table(previous_table_id).status = TableStatus.AVAILABLE

        apply_changes(reservation, changes)
        self.db.commit()

        logger.info(
            f"Reservation {reservation.reservation_number} updated "
            f"(status: {reservation.status.value})"
        )
        return self.get_reservation(reservation.id)

    def delete_reservation(self, reservation_id: int) -> None:
        reservation = get_or_404(self.db, Reservation, reservation_id, "Reservation")
        number = reservation.reservation_number
        table_id = reservation.table_id

        table = self.db.get(CafeTable, table_id)
        if table is not None:
            table.status = TableStatus.AVAILABLE
        self.db.delete(reservation)
        self.db.commit()

        logger.info(f"Reservation {number} deleted, table {table_id} released")

    def _lock_table(self, table_id: int) -> CafeTable:
        table = (
            self.db.query(CafeTable)
            .filter(CafeTable.id == table_id)
            .with_for_update()
            .first()
        )
        if table is None:
            raise NotFoundError("Table")
        return table

    def _check_capacity(self, table_id: int, party_size: int) -> None:
        table = self._lock_table(table_id)
        if party_size > table.seating_capacity:
            raise ValidationError(
                f"Party size exceeds table capacity of {table.seating_capacity}"
            )

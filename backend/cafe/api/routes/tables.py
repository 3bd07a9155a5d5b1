"""Table and reservation routes. Reads are public, writes need a token."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Query, status

from cafe.core.config import AppSettings
from cafe.core.rbac import CurrentUser
from cafe.db.session import DbSession
from cafe.models.table import ReservationStatus, TableLocation, TableStatus
from cafe.schemas.base import MessageResponse
from cafe.schemas.tables import (
    ReservationCreate,
    ReservationEnvelope,
    ReservationResponse,
    ReservationUpdate,
    TableCreate,
    TableEnvelope,
    TableResponse,
    TableUpdate,
)
from cafe.services.table_service import ReservationService, TableService

router = APIRouter()


# Tables

@router.post("/tables", response_model=TableEnvelope, status_code=status.HTTP_201_CREATED)
def create_table(table_in: TableCreate, db: DbSession, current_user: CurrentUser):
    table = TableService(db).create_table(table_in)
    return {"message": "Table created successfully", "table": table}


@router.get("/tables", response_model=List[TableResponse])
def list_tables(
    db: DbSession,
    status: Optional[TableStatus] = Query(None),
    location: Optional[TableLocation] = Query(None),
):
    return TableService(db).list_tables(status=status, location=location)


@router.get("/tables/{table_id}", response_model=TableResponse)
def get_table(table_id: int, db: DbSession):
    return TableService(db).get_table(table_id)


@router.put("/tables/{table_id}", response_model=TableEnvelope)
def update_table(table_id: int, table_in: TableUpdate, db: DbSession, current_user: CurrentUser):
    table = TableService(db).update_table(table_id, table_in.model_dump(exclude_unset=True))
    return {"message": "Table updated successfully", "table": table}


@router.delete("/tables/{table_id}", response_model=MessageResponse)
def delete_table(table_id: int, db: DbSession, current_user: CurrentUser):
    TableService(db).delete_table(table_id)
    return {"message": "Table deleted successfully"}


# Reservations

@router.post("/reservations", response_model=ReservationEnvelope, status_code=status.HTTP_201_CREATED)
def create_reservation(
    reservation_in: ReservationCreate,
    db: DbSession,
    app_settings: AppSettings,
    current_user: CurrentUser,
):
    reservation = ReservationService(db, app_settings).create_reservation(reservation_in)
    return {"message": "Reservation created successfully", "reservation": reservation}


@router.get("/reservations", response_model=List[ReservationResponse])
def list_reservations(
    db: DbSession,
    status: Optional[ReservationStatus] = Query(None),
    reservation_date: Optional[date] = Query(None, alias="date"),
):
    return ReservationService(db).list_reservations(status=status, reservation_date=reservation_date)


@router.get("/reservations/{reservation_id}", response_model=ReservationResponse)
def get_reservation(reservation_id: int, db: DbSession):
    return ReservationService(db).get_reservation(reservation_id)


@router.put("/reservations/{reservation_id}", response_model=ReservationEnvelope)
def update_reservation(
    reservation_id: int, reservation_in: ReservationUpdate, db: DbSession, current_user: CurrentUser
):
    reservation = ReservationService(db).update_reservation(
        reservation_id, reservation_in.model_dump(exclude_unset=True)
    )
    return {"message": "Reservation updated successfully", "reservation": reservation}


@router.delete("/reservations/{reservation_id}", response_model=MessageResponse)
def delete_reservation(reservation_id: int, db: DbSession, current_user: CurrentUser):
    ReservationService(db).delete_reservation(reservation_id)
    return {"message": "Reservation deleted successfully"}

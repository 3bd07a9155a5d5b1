"""Table and reservation schemas."""

from __future__ import annotations

from datetime import date, datetime, time
from typing import List, Optional

from pydantic import EmailStr, Field

from cafe.models.table import ReservationStatus, TableLocation, TableStatus
from cafe.schemas.base import CamelModel


# Tables

class TableCreate(CamelModel):
    table_number: int = Field(..., ge=1)
    seating_capacity: int = Field(4, ge=1)
    location: TableLocation = TableLocation.INDOOR
    status: TableStatus = TableStatus.AVAILABLE
    description: Optional[str] = None


class TableUpdate(CamelModel):
    table_number: Optional[int] = Field(None, ge=1)
    seating_capacity: Optional[int] = Field(None, ge=1)
    location: Optional[TableLocation] = None
    status: Optional[TableStatus] = None
    description: Optional[str] = None


class TableSummary(CamelModel):
    id: int
    table_number: int
    seating_capacity: int
    location: TableLocation
    status: TableStatus
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Reservations

class ReservationCreate(CamelModel):
    table_id: int
    customer_name: str = Field(..., min_length=1, max_length=100)
    customer_phone: str = Field(..., min_length=1, max_length=15)
    customer_email: Optional[EmailStr] = None
    party_size: int = Field(2, ge=1)
    reservation_date: date
    reservation_time: time
    duration: int = Field(60, ge=1)
    status: ReservationStatus = ReservationStatus.PENDING
    special_requests: Optional[str] = None


class ReservationUpdate(CamelModel):
    table_id: Optional[int] = None
    customer_name: Optional[str] = Field(None, min_length=1, max_length=100)
    customer_phone: Optional[str] = Field(None, min_length=1, max_length=15)
    customer_email: Optional[EmailStr] = None
    party_size: Optional[int] = Field(None, ge=1)
    reservation_date: Optional[date] = None
    reservation_time: Optional[time] = None
    duration: Optional[int] = Field(None, ge=1)
    status: Optional[ReservationStatus] = None
    special_requests: Optional[str] = None


class ReservationSummary(CamelModel):
    id: int
    reservation_number: str
    table_id: int
    customer_name: str
    customer_phone: str
    customer_email: Optional[str] = None
    party_size: int
    reservation_date: date
    reservation_time: time
    duration: int
    status: ReservationStatus
    special_requests: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TableResponse(TableSummary):
    reservations: List[ReservationSummary] = []


class ReservationResponse(ReservationSummary):
    table: Optional[TableSummary] = None


class TableEnvelope(CamelModel):
    message: str
    table: TableResponse


class ReservationEnvelope(CamelModel):
    message: str
    reservation: ReservationResponse

"""Payment and invoice routes."""

from typing import List, Optional

from fastapi import APIRouter, Query, status

from cafe.core.config import AppSettings
from cafe.core.rbac import CurrentUser
from cafe.db.session import DbSession
from cafe.models.billing import InvoiceStatus, PaymentMethod, PaymentStatus
from cafe.schemas.base import MessageResponse
from cafe.schemas.billing import (
    InvoiceCreate,
    InvoiceEnvelope,
    InvoiceResponse,
    InvoiceUpdate,
    PaymentCreate,
    PaymentEnvelope,
    PaymentResponse,
    PaymentUpdate,
)
from cafe.services.billing_service import BillingService

router = APIRouter()


# Invoices - registered before /{payment_id}

@router.post("/invoices", response_model=InvoiceEnvelope, status_code=status.HTTP_201_CREATED)
def create_invoice(
    invoice_in: InvoiceCreate, db: DbSession, app_settings: AppSettings, current_user: CurrentUser
):
    invoice = BillingService(db, app_settings).create_invoice(invoice_in)
    return {"message": "Invoice created successfully", "invoice": invoice}


@router.get("/invoices", response_model=List[InvoiceResponse])
def list_invoices(
    db: DbSession,
    current_user: CurrentUser,
    status: Optional[InvoiceStatus] = Query(None),
    payment_id: Optional[int] = Query(None, alias="paymentId"),
):
    return BillingService(db).list_invoices(status=status, payment_id=payment_id)


@router.get("/invoices/{invoice_id}", response_model=InvoiceResponse)
def get_invoice(invoice_id: int, db: DbSession, current_user: CurrentUser):
    return BillingService(db).get_invoice(invoice_id)


@router.put("/invoices/{invoice_id}", response_model=InvoiceEnvelope)
def update_invoice(invoice_id: int, invoice_in: InvoiceUpdate, db: DbSession, current_user: CurrentUser):
    invoice = BillingService(db).update_invoice(invoice_id, invoice_in.model_dump(exclude_unset=True))
    return {"message": "Invoice updated successfully", "invoice": invoice}


@router.delete("/invoices/{invoice_id}", response_model=MessageResponse)
def delete_invoice(invoice_id: int, db: DbSession, current_user: CurrentUser):
    BillingService(db).delete_invoice(invoice_id)
    return {"message": "Invoice deleted successfully"}


# Payments

@router.post("", response_model=PaymentEnvelope, status_code=status.HTTP_201_CREATED)
def create_payment(
    payment_in: PaymentCreate, db: DbSession, app_settings: AppSettings, current_user: CurrentUser
):
    payment = BillingService(db, app_settings).create_payment(payment_in)
    return {"message": "Payment created successfully", "payment": payment}


@router.get("", response_model=List[PaymentResponse])
def list_payments(
    db: DbSession,
    current_user: CurrentUser,
    status: Optional[PaymentStatus] = Query(None),
    method: Optional[PaymentMethod] = Query(None),
):
    return BillingService(db).list_payments(status=status, method=method)


@router.get("/{payment_id}", response_model=PaymentResponse)
def get_payment(payment_id: int, db: DbSession, current_user: CurrentUser):
    return BillingService(db).get_payment(payment_id)


@router.put("/{payment_id}", response_model=PaymentEnvelope)
def update_payment(payment_id: int, payment_in: PaymentUpdate, db: DbSession, current_user: CurrentUser):
    payment = BillingService(db).update_payment(payment_id, payment_in.model_dump(exclude_unset=True))
    return {"message": "Payment updated successfully", "payment": payment}


@router.delete("/{payment_id}", response_model=MessageResponse)
def delete_payment(payment_id: int, db: DbSession, current_user: CurrentUser):
    BillingService(db).delete_payment(payment_id)
    return {"message": "Payment deleted successfully"}

"""Payment and invoice schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import EmailStr, Field

from cafe.models.billing import InvoiceStatus, PaymentMethod, PaymentStatus
from cafe.schemas.base import CamelModel, Money, MoneyIn


# Payments

class PaymentCreate(CamelModel):
    order_id: int
    amount: MoneyIn
    tax: MoneyIn = Decimal("0")
    discount: MoneyIn = Decimal("0")
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_status: PaymentStatus = PaymentStatus.PENDING
    paid_by: Optional[str] = Field(None, max_length=100)


class PaymentUpdate(CamelModel):
    amount: Optional[MoneyIn] = None
    tax: Optional[MoneyIn] = None
    discount: Optional[MoneyIn] = None
    payment_method: Optional[PaymentMethod] = None
    payment_status: Optional[PaymentStatus] = None
    paid_by: Optional[str] = Field(None, max_length=100)


class PaymentSummary(CamelModel):
    id: int
    payment_number: str
    order_id: int
    amount: Money
    tax: Money
    discount: Money
    total_amount: Money
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    paid_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Invoices

class InvoiceCreate(CamelModel):
    payment_id: int
    customer_name: str = Field(..., min_length=1, max_length=100)
    customer_email: Optional[EmailStr] = None
    subtotal: MoneyIn
    tax: MoneyIn = Decimal("0")
    discount: MoneyIn = Decimal("0")
    invoice_date: Optional[datetime] = None
    status: InvoiceStatus = InvoiceStatus.DRAFT


class InvoiceUpdate(CamelModel):
    customer_name: Optional[str] = Field(None, min_length=1, max_length=100)
    customer_email: Optional[EmailStr] = None
    subtotal: Optional[MoneyIn] = None
    tax: Optional[MoneyIn] = None
    discount: Optional[MoneyIn] = None
    invoice_date: Optional[datetime] = None
    status: Optional[InvoiceStatus] = None


class InvoiceSummary(CamelModel):
    id: int
    invoice_number: str
    payment_id: int
    customer_name: str
    customer_email: Optional[str] = None
    subtotal: Money
    tax: Money
    discount: Money
    grand_total: Money
    invoice_date: Optional[datetime] = None
    status: InvoiceStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PaymentResponse(PaymentSummary):
    invoices: List[InvoiceSummary] = []


class InvoiceResponse(InvoiceSummary):
    payment: Optional[PaymentSummary] = None


class PaymentEnvelope(CamelModel):
    message: str
    payment: PaymentResponse


class InvoiceEnvelope(CamelModel):
    message: str
    invoice: InvoiceResponse

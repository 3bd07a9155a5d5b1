"""Payments and invoices."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, selectinload

from cafe.core.config import Settings, get_settings
from cafe.core.errors import NotFoundError, ValidationError
from cafe.core.identifiers import (
    INVOICE_PREFIX,
    PAYMENT_PREFIX,
    insert_with_business_number,
)
from cafe.core.money import net_total, to_money
from cafe.models.billing import Invoice, InvoiceStatus, Payment
from cafe.schemas.billing import InvoiceCreate, PaymentCreate
from cafe.services.common import apply_changes, build, get_or_404

logger = logging.getLogger(__name__)

MONEY_FIELDS = ("amount", "tax", "discount", "subtotal")


def _quantize(fields: Dict[str, Any]) -> Dict[str, Any]:
    for key in MONEY_FIELDS:
        if fields.get(key) is not None:
            fields[key] = to_money(fields[key])
    return fields


class BillingService:
    """Payment and invoice CRUD with their derived totals.

    - ``Payment.total_amount = amount + tax - discount``
    - ``Invoice.grand_total = subtotal + tax - discount``
    - a payment has at most one invoice that is not cancelled
    """

    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()

    # Payments

    def list_payments(self, status: Optional[str] = None, method: Optional[str] = None) -> List[Payment]:
        query = self.db.query(Payment).options(selectinload(Payment.invoices))
        if status:
            query = query.filter(Payment.payment_status == status)
        if method:
            query = query.filter(Payment.payment_method == method)
        return query.order_by(Payment.created_at.desc(), Payment.id.desc()).all()

    def get_payment(self, payment_id: int) -> Payment:
        payment = (
            self.db.query(Payment)
            .options(selectinload(Payment.invoices))
            .filter(Payment.id == payment_id)
            .first()
        )
        if payment is None:
            raise NotFoundError("Payment")
        return payment

    def create_payment(self, data: PaymentCreate) -> Payment:
        fields = _quantize(data.model_dump())
        fields["total_amount"] = net_total(fields["amount"], fields["tax"], fields["discount"])

        payment = build(Payment, fields)
        insert_with_business_number(
            self.db, payment, "payment_number", PAYMENT_PREFIX, self.settings.business_number_attempts
        )
        self.db.commit()

        logger.info(
            f"Payment {payment.payment_number} created for order {payment.order_id} "
            f"(total: {payment.total_amount}, method: {payment.payment_method.value})"
        )
        return self.get_payment(payment.id)

    def update_payment(self, payment_id: int, changes: Dict[str, Any]) -> Payment:
        payment = get_or_404(self.db, Payment, payment_id, "Payment")
        apply_changes(payment, _quantize(dict(changes)))
        payment.total_amount = net_total(payment.amount, payment.tax, payment.discount)
        self.db.commit()

        logger.info(f"Payment {payment.payment_number} updated (status: {payment.payment_status.value})")
        return self.get_payment(payment.id)

    def delete_payment(self, payment_id: int) -> None:
        payment = get_or_404(self.db, Payment, payment_id, "Payment")
        number = payment.payment_number
        # Cascades to the invoices within this transaction
        self.db.delete(payment)
        self.db.commit()
        logger.info(f"Payment {number} deleted (ID: {payment_id})")

    # Invoices

    def list_invoices(self, status: Optional[str] = None, payment_id: Optional[int] = None) -> List[Invoice]:
        query = self.db.query(Invoice).options(selectinload(Invoice.payment))
        if status:
            query = query.filter(Invoice.status == status)
        if payment_id is not None:
            query = query.filter(Invoice.payment_id == payment_id)
        return query.order_by(Invoice.created_at.desc(), Invoice.id.desc()).all()

    def get_invoice(self, invoice_id: int) -> Invoice:
        invoice = (
            self.db.query(Invoice)
            .options(selectinload(Invoice.payment))
            .filter(Invoice.id == invoice_id)
            .first()
        )
        if invoice is None:
            raise NotFoundError("Invoice")
        return invoice

    def create_invoice(self, data: InvoiceCreate) -> Invoice:
        fields = _quantize(data.model_dump())
        if fields.get("invoice_date") is None:
            fields.pop("invoice_date", None)
        fields["grand_total"] = net_total(fields["subtotal"], fields["tax"], fields["discount"])

        def lock_payment():
            payment = self._lock_payment(data.payment_id)
            if data.status != InvoiceStatus.CANCELLED:
                self._ensure_single_active_invoice(payment.id)

        invoice = build(Invoice, fields)
        insert_with_business_number(
            self.db,
            invoice,
            "invoice_number",
            INVOICE_PREFIX,
            self.settings.business_number_attempts,
            before_insert=lock_payment,
        )
        self.db.commit()

        logger.info(
            f"Invoice {invoice.invoice_number} created for payment {invoice.payment_id} "
            f"(grand total: {invoice.grand_total})"
        )
        return self.get_invoice(invoice.id)

    def update_invoice(self, invoice_id: int, changes: Dict[str, Any]) -> Invoice:
        invoice = get_or_404(self.db, Invoice, invoice_id, "Invoice")

        reactivating = (
            invoice.status == InvoiceStatus.CANCELLED
            and changes.get("status") not in (None, InvoiceStatus.CANCELLED)
        )
        if reactivating:
            self._lock_payment(invoice.payment_id)
            self._ensure_single_active_invoice(invoice.payment_id)

        apply_changes(invoice, _quantize(dict(changes)))
        invoice.grand_total = net_total(invoice.subtotal, invoice.tax, invoice.discount)
        self.db.commit()

        logger.info(f"Invoice {invoice.invoice_number} updated (status: {invoice.status.value})")
        return self.get_invoice(invoice.id)

    def delete_invoice(self, invoice_id: int) -> None:
        invoice = get_or_404(self.db, Invoice, invoice_id, "Invoice")
        number = invoice.invoice_number
        self.db.delete(invoice)
        self.db.commit()
        logger.info(f"Invoice {number} deleted (ID: {invoice_id})")

    # Internals

    def _lock_payment(self, payment_id: int) -> Payment:
        payment = (
            self.db.query(Payment)
            .filter(Payment.id == payment_id)
            .with_for_update()
            .first()
        )
        if payment is None:
            raise NotFoundError("Payment")
        return payment

    def _ensure_single_active_invoice(self, payment_id: int) -> None:
        existing = (
            self.db.query(Invoice)
            .filter(
                Invoice.payment_id == payment_id,
                Invoice.status != InvoiceStatus.CANCELLED,
            )
            .first()
        )
        if existing is not None:
            raise ValidationError(
                f"Payment already has an active invoice ({existing.invoice_number})"
            )

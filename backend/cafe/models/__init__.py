"""ORM models. Importing this package registers every table on Base.metadata."""

from cafe.models.user import User
from cafe.models.menu import (
    MenuItem, MenuCategory, StockItem, StockCategory, StockUnit, StockStatus,
    compute_stock_status,
)
from cafe.models.order import Order, OrderItem, OrderType, OrderStatus
from cafe.models.billing import (
    Payment, Invoice, PaymentMethod, PaymentStatus, InvoiceStatus,
)
from cafe.models.table import (
    CafeTable, Reservation, TableLocation, TableStatus, ReservationStatus,
    RELEASING_STATUSES,
)

__all__ = [
    "User",
    "MenuItem", "MenuCategory", "StockItem", "StockCategory", "StockUnit", "StockStatus",
    "compute_stock_status",
    "Order", "OrderItem", "OrderType", "OrderStatus",
    "Payment", "Invoice", "PaymentMethod", "PaymentStatus", "InvoiceStatus",
    "CafeTable", "Reservation", "TableLocation", "TableStatus", "ReservationStatus",
    "RELEASING_STATUSES",
]

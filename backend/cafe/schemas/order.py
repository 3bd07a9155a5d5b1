"""Order and order item schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from cafe.models.order import OrderStatus, OrderType
from cafe.schemas.base import CamelModel, Money, MoneyIn


class OrderLineIn(CamelModel):
    """An item supplied inline when creating an order."""

    item_name: str = Field(..., min_length=1, max_length=100)
    quantity: int = Field(1, ge=1)
    unit_price: MoneyIn
    special_instructions: Optional[str] = None


class OrderItemCreate(OrderLineIn):
    """Add an item to an existing order."""

    order_id: int


class OrderItemUpdate(CamelModel):
    item_name: Optional[str] = Field(None, min_length=1, max_length=100)
    quantity: Optional[int] = Field(None, ge=1)
    unit_price: Optional[MoneyIn] = None
    special_instructions: Optional[str] = None


class OrderItemResponse(CamelModel):
    id: int
    order_id: int
    item_name: str
    quantity: int
    unit_price: Money
    total_price: Money
    special_instructions: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrderCreate(CamelModel):
    customer_name: str = Field(..., min_length=1, max_length=100)
    customer_id: Optional[int] = None
    order_type: OrderType = OrderType.DINE_IN
    table_number: Optional[int] = Field(None, ge=1)
    notes: Optional[str] = None
    items: List[OrderLineIn] = Field(default_factory=list)


class OrderUpdate(CamelModel):
    """Header fields only; items change through the order item endpoints."""

    customer_name: Optional[str] = Field(None, min_length=1, max_length=100)
    order_type: Optional[OrderType] = None
    status: Optional[OrderStatus] = None
    table_number: Optional[int] = Field(None, ge=1)
    notes: Optional[str] = None


class OrderResponse(CamelModel):
    id: int
    order_number: str
    customer_id: Optional[int] = None
    customer_name: str
    order_type: OrderType
    status: OrderStatus
    table_number: Optional[int] = None
    total_amount: Money
    notes: Optional[str] = None
    items: List[OrderItemResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrderEnvelope(CamelModel):
    message: str
    order: OrderResponse


class OrderItemEnvelope(CamelModel):
    message: str
    order_item: OrderItemResponse

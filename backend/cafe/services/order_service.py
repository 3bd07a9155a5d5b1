"""Order intake: orders, their items and the running order total."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from cafe.core.config import Settings, get_settings
from cafe.core.errors import NotFoundError
from cafe.core.identifiers import ORDER_PREFIX, insert_with_business_number
from cafe.core.money import line_total, to_money
from cafe.models.order import Order, OrderItem
from cafe.schemas.order import OrderCreate, OrderItemCreate
from cafe.services.common import apply_changes, build, get_or_404

logger = logging.getLogger(__name__)


class OrderService:
    """Orders and order items.

    ``Order.total_amount`` is never taken from the client. After any item
    write it is recomputed with a single SUM over the order's items, in the
    same transaction and with the order row locked.
    """

    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()

    # Orders

    def list_orders(self, status: Optional[str] = None, order_type: Optional[str] = None) -> List[Order]:
        query = self.db.query(Order).options(selectinload(Order.items))
        if status:
            query = query.filter(Order.status == status)
        if order_type:
            query = query.filter(Order.order_type == order_type)
        return query.order_by(Order.created_at.desc(), Order.id.desc()).all()

    def get_order(self, order_id: int) -> Order:
        order = (
            self.db.query(Order)
            .options(selectinload(Order.items))
            .filter(Order.id == order_id)
            .first()
        )
        if order is None:
            raise NotFoundError("Order")
        return order

    def create_order(self, data: OrderCreate, customer_id: Optional[int] = None) -> Order:
        fields = data.model_dump(exclude={"items"})
        if fields.get("customer_id") is None:
            fields["customer_id"] = customer_id
        fields["total_amount"] = to_money(0)

        order = build(Order, fields)
        insert_with_business_number(
            self.db, order, "order_number", ORDER_PREFIX, self.settings.business_number_attempts
        )

        for line in data.items:
            self.db.add(self._build_item(order.id, line.model_dump()))
        self.db.flush()
        self._recalculate_total(order)

        self.db.commit()
        logger.info(
            f"Order {order.order_number} created (ID: {order.id}, items: {len(data.items)}, "
            f"total: {order.total_amount})"
        )
        return self.get_order(order.id)

    def update_order(self, order_id: int, changes: Dict[str, Any]) -> Order:
        order = get_or_404(self.db, Order, order_id, "Order")
        apply_changes(order, changes)
        self.db.commit()
        logger.info(f"Order {order.order_number} updated (ID: {order.id})")
        return self.get_order(order.id)

    def delete_order(self, order_id: int) -> None:
        order = self._lock_order(order_id)
        number = order.order_number
        # Cascades to the items within this transaction
        self.db.delete(order)
        self.db.commit()
        logger.info(f"Order {number} deleted (ID: {order_id})")

    # Order items

    def list_items(self, order_id: int) -> List[OrderItem]:
        return (
            self.db.query(OrderItem)
            .filter(OrderItem.order_id == order_id)
            .order_by(OrderItem.id)
            .all()
        )

    def get_item(self, item_id: int) -> OrderItem:
        return get_or_404(self.db, OrderItem, item_id, "Order item")

    def add_item(self, data: OrderItemCreate) -> OrderItem:
        order = self._lock_order(data.order_id)

        item = self._build_item(order.id, data.model_dump(exclude={"order_id"}))
        self.db.add(item)
        self.db.flush()
        self._recalculate_total(order)

        self.db.commit()
        logger.info(f"Item '{item.item_name}' x{item.quantity} added to order {order.order_number}")
        self.db.refresh(item)
        return item

    def update_item(self, item_id: int, changes: Dict[str, Any]) -> OrderItem:
        item = self.get_item(item_id)
        order = self._lock_order(item.order_id)

        apply_changes(item, changes)
        # Derived from the merged values, not the raw input
        item.unit_price = to_money(item.unit_price)
        item.total_price = line_total(item.quantity, item.unit_price)
        self.db.flush()
        self._recalculate_total(order)

        self.db.commit()
        logger.info(f"Order item {item.id} updated on order {order.order_number}")
        self.db.refresh(item)
        return item

    def delete_item(self, item_id: int) -> None:
        item = self.get_item(item_id)
        order = self._lock_order(item.order_id)

        self.db.delete(item)
        self.db.flush()
        self._recalculate_total(order)

        self.db.commit()
        logger.info(f"Order item {item_id} deleted from order {order.order_number}")

    # Internals

    def _build_item(self, order_id: int, fields: Dict[str, Any]) -> OrderItem:
        fields["order_id"] = order_id
        fields["unit_price"] = to_money(fields["unit_price"])
        fields["total_price"] = line_total(fields["quantity"], fields["unit_price"])
        return build(OrderItem, fields)

    def _lock_order(self, order_id: int) -> Order:
        """Load the order row FOR UPDATE (a no-op on SQLite)."""
        order = (
            self.db.query(Order)
            .filter(Order.id == order_id)
            .with_for_update()
            .first()
        )
        if order is None:
            raise NotFoundError("Order")
        return order

    def _recalculate_total(self, order: Order) -> None:
        total = (
            self.db.query(func.coalesce(func.sum(OrderItem.total_price), 0))
            .filter(OrderItem.order_id == order.id)
            .scalar()
        )
        order.total_amount = to_money(total)

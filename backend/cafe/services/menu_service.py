"""Menu items and inventory stock."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cafe.core.errors import ValidationError
from cafe.core.money import to_money
from cafe.models.menu import MenuItem, StockItem, StockStatus, compute_stock_status
from cafe.schemas.menu import MenuItemCreate, StockCreate
from cafe.services.common import apply_changes, build, get_or_404

logger = logging.getLogger(__name__)

DUPLICATE_MENU_ITEM = "Menu item with this name already exists"

# Stored as Numeric(10, 2); rounded before the status is derived from them
STOCK_AMOUNT_FIELDS = ("quantity", "minimum_stock", "unit_price")


def _quantize_stock(fields: Dict[str, Any]) -> Dict[str, Any]:
    for key in STOCK_AMOUNT_FIELDS:
        if fields.get(key) is not None:
            fields[key] = to_money(fields[key])
    return fields


class MenuService:
    """Menu item CRUD. Names are unique across the menu."""

    def __init__(self, db: Session):
        self.db = db

    def list_items(self, category: Optional[str] = None, available: Optional[bool] = None) -> List[MenuItem]:
        query = self.db.query(MenuItem)
        if category:
            query = query.filter(MenuItem.category == category)
        if available is not None:
            query = query.filter(MenuItem.is_available == available)
        return query.order_by(MenuItem.category, MenuItem.name).all()

    def get_item(self, item_id: int) -> MenuItem:
        return get_or_404(self.db, MenuItem, item_id, "Menu item")

    def create_item(self, data: MenuItemCreate) -> MenuItem:
        self._ensure_unique_name(data.name)

        fields = data.model_dump()
        fields["price"] = to_money(fields["price"])
        item = build(MenuItem, fields)
        self.db.add(item)
        self._commit_unique()
        self.db.refresh(item)

        logger.info(f"Menu item created: {item.name} (ID: {item.id}, category: {item.category.value})")
        return item

    def update_item(self, item_id: int, changes: Dict[str, Any]) -> MenuItem:
        item = self.get_item(item_id)

        new_name = changes.get("name")
        if new_name is not None and new_name != item.name:
            self._ensure_unique_name(new_name, exclude_id=item.id)
        if changes.get("price") is not None:
            changes = {**changes, "price": to_money(changes["price"])}

        apply_changes(item, changes)
        self._commit_unique()
        self.db.refresh(item)

        logger.info(f"Menu item updated: {item.name} (ID: {item.id})")
        return item

    def delete_item(self, item_id: int) -> None:
        item = self.get_item(item_id)
        name = item.name
        self.db.delete(item)
        self.db.commit()
        logger.info(f"Menu item deleted: {name} (ID: {item_id})")

    def _ensure_unique_name(self, name: str, exclude_id: Optional[int] = None) -> None:
        query = self.db.query(MenuItem.id).filter(MenuItem.name == name)
        if exclude_id is not None:
            query = query.filter(MenuItem.id != exclude_id)
        if query.first() is not None:
            raise ValidationError(DUPLICATE_MENU_ITEM)

    def _commit_unique(self) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ValidationError(DUPLICATE_MENU_ITEM)


class StockService:
    """Inventory CRUD. ``status`` is derived from quantity and minimum stock on every write."""

    ALERT_STATUSES = (StockStatus.LOW_STOCK, StockStatus.OUT_OF_STOCK)

    def __init__(self, db: Session):
        self.db = db

    def list_stock(self, status: Optional[str] = None, category: Optional[str] = None) -> List[StockItem]:
        query = self.db.query(StockItem)
        if status:
            query = query.filter(StockItem.status == status)
        if category:
            query = query.filter(StockItem.category == category)
        return query.order_by(StockItem.ingredient_name, StockItem.id).all()

    def list_alerts(self) -> List[StockItem]:
        """Low and out-of-stock items, emptiest first."""
        return (
            self.db.query(StockItem)
            .filter(StockItem.status.in_(self.ALERT_STATUSES))
            .order_by(StockItem.quantity, StockItem.id)
            .all()
        )

    def get_stock(self, stock_id: int) -> StockItem:
        return get_or_404(self.db, StockItem, stock_id, "Stock item")

    def create_stock(self, data: StockCreate) -> StockItem:
        fields = _quantize_stock(data.model_dump())
        fields["status"] = compute_stock_status(fields["quantity"], fields["minimum_stock"])

        stock = build(StockItem, fields)
        self.db.add(stock)
        self.db.commit()
        self.db.refresh(stock)

        logger.info(f"Stock item created: {stock.ingredient_name} (ID: {stock.id}, status: {stock.status.value})")
        return stock

    def update_stock(self, stock_id: int, changes: Dict[str, Any]) -> StockItem:
        stock = self.get_stock(stock_id)
        previous = stock.status

        apply_changes(stock, _quantize_stock(dict(changes)))
        stock.refresh_status()
        self.db.commit()
        self.db.refresh(stock)

        if stock.status != previous:
            logger.info(
                f"Stock item {stock.ingredient_name} (ID: {stock.id}) moved "
                f"{previous.value} -> {stock.status.value}"
            )
        return stock

    def delete_stock(self, stock_id: int) -> None:
        stock = self.get_stock(stock_id)
        name = stock.ingredient_name
        self.db.delete(stock)
        self.db.commit()
        logger.info(f"Stock item deleted: {name} (ID: {stock_id})")

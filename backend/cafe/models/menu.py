"""Menu and inventory models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, Date, Enum as SQLEnum, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, validates

from cafe.db.base import Base, TimestampMixin
from cafe.models.validators import enum_values, non_negative


class MenuCategory(str, Enum):
    APPETIZER = "appetizer"
    MAIN_COURSE = "main_course"
    DESSERT = "dessert"
    BEVERAGE = "beverage"
    SNACK = "snack"
    SPECIAL = "special"


class StockCategory(str, Enum):
    DAIRY = "dairy"
    MEAT = "meat"
    VEGETABLE = "vegetable"
    FRUIT = "fruit"
    GRAIN = "grain"
    SPICE = "spice"
    BEVERAGE = "beverage"
    OTHER = "other"


class StockUnit(str, Enum):
    KG = "kg"
    G = "g"
    L = "l"
    ML = "ml"
    PIECES = "pieces"
    PACKETS = "packets"


class StockStatus(str, Enum):
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


DEFAULT_MINIMUM_STOCK = Decimal("10")


def compute_stock_status(quantity, minimum_stock) -> StockStatus:
    """Stock status is a pure function of quantity against the minimum threshold."""
    quantity = Decimal(str(quantity if quantity is not None else 0))
    minimum = Decimal(str(minimum_stock if minimum_stock is not None else DEFAULT_MINIMUM_STOCK))
    if quantity <= 0:
        return StockStatus.OUT_OF_STOCK
    if quantity <= minimum:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


class MenuItem(Base, TimestampMixin):
    """A dish or drink offered on the menu."""

    __tablename__ = "menu_items"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[MenuCategory] = mapped_column(
        SQLEnum(MenuCategory, name="menu_category", values_callable=enum_values),
        default=MenuCategory.MAIN_COURSE,
        nullable=False,
    )
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    image: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    is_available: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    preparation_time: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # minutes

    @validates("price", "preparation_time")
    def _validate_non_negative(self, key, value):
        return non_negative(key, value)


class StockItem(Base, TimestampMixin):
    """An ingredient held in inventory."""

    __tablename__ = "stock_items"

    id: Mapped[int] = mapped_column(primary_key=True)
    ingredient_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    category: Mapped[StockCategory] = mapped_column(
        SQLEnum(StockCategory, name="stock_category", values_callable=enum_values),
        default=StockCategory.OTHER,
        nullable=False,
    )
    quantity: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), nullable=False)
    unit: Mapped[StockUnit] = mapped_column(
        SQLEnum(StockUnit, name="stock_unit", values_callable=enum_values),
        default=StockUnit.KG,
        nullable=False,
    )
    minimum_stock: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), default=DEFAULT_MINIMUM_STOCK, nullable=False
    )
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    supplier: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    expiry_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    status: Mapped[StockStatus] = mapped_column(
        SQLEnum(StockStatus, name="stock_status", values_callable=enum_values),
        default=StockStatus.IN_STOCK,
        nullable=False,
        index=True,
    )

    @validates("minimum_stock", "unit_price")
    def _validate_non_negative(self, key, value):
        return non_negative(key, value)

    def refresh_status(self) -> StockStatus:
        self.status = compute_stock_status(self.quantity, self.minimum_stock)
        return self.status

"""Menu item and stock schemas."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from cafe.models.menu import MenuCategory, StockCategory, StockStatus, StockUnit
from cafe.schemas.base import CamelModel, Money, MoneyIn


# Menu items

class MenuItemCreate(CamelModel):
    """Create menu item body (JSON or multipart form fields)."""

    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    category: MenuCategory = MenuCategory.MAIN_COURSE
    price: MoneyIn
    image: Optional[str] = Field(None, max_length=255)
    is_available: bool = True
    preparation_time: Optional[int] = Field(None, ge=0)


class MenuItemUpdate(CamelModel):
    """Partial menu item update."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    category: Optional[MenuCategory] = None
    price: Optional[MoneyIn] = None
    image: Optional[str] = Field(None, max_length=255)
    is_available: Optional[bool] = None
    preparation_time: Optional[int] = Field(None, ge=0)


class MenuItemResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    category: MenuCategory
    price: Money
    image: Optional[str] = None
    is_available: bool
    preparation_time: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MenuItemEnvelope(CamelModel):
    message: str
    menu_item: MenuItemResponse


# Stock

class StockCreate(CamelModel):
    """Create stock item body. ``status`` is derived, never accepted."""

    ingredient_name: str = Field(..., min_length=1, max_length=100)
    category: StockCategory = StockCategory.OTHER
    quantity: Decimal = Decimal("0")
    unit: StockUnit = StockUnit.KG
    minimum_stock: MoneyIn = Decimal("10")
    unit_price: MoneyIn
    supplier: Optional[str] = Field(None, max_length=100)
    expiry_date: Optional[date] = None


class StockUpdate(CamelModel):
    """Partial stock update; status is recomputed from the merged values."""

    ingredient_name: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[StockCategory] = None
    quantity: Optional[Decimal] = None
    unit: Optional[StockUnit] = None
    minimum_stock: Optional[MoneyIn] = None
    unit_price: Optional[MoneyIn] = None
    supplier: Optional[str] = Field(None, max_length=100)
    expiry_date: Optional[date] = None


class StockResponse(CamelModel):
    id: int
    ingredient_name: str
    category: StockCategory
    quantity: Money
    unit: StockUnit
    minimum_stock: Money
    unit_price: Money
    supplier: Optional[str] = None
    expiry_date: Optional[date] = None
    status: StockStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StockEnvelope(CamelModel):
    message: str
    stock: StockResponse

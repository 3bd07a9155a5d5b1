"""Order and order item routes."""

from typing import List, Optional

from fastapi import APIRouter, Query, status

from cafe.core.config import AppSettings
from cafe.core.rbac import CurrentUser
from cafe.db.session import DbSession
from cafe.models.order import OrderStatus, OrderType
from cafe.schemas.base import MessageResponse
from cafe.schemas.order import (
    OrderCreate,
    OrderEnvelope,
    OrderItemCreate,
    OrderItemEnvelope,
    OrderItemResponse,
    OrderItemUpdate,
    OrderResponse,
    OrderUpdate,
)
from cafe.services.order_service import OrderService

router = APIRouter()


# Order items - registered before /{order_id}

@router.post("/items", response_model=OrderItemEnvelope, status_code=status.HTTP_201_CREATED)
def add_order_item(item_in: OrderItemCreate, db: DbSession, current_user: CurrentUser):
    item = OrderService(db).add_item(item_in)
    return {"message": "Item added to order", "order_item": item}


@router.get("/items/{order_id}", response_model=List[OrderItemResponse])
def list_order_items(order_id: int, db: DbSession, current_user: CurrentUser):
    return OrderService(db).list_items(order_id)


@router.put("/items/{item_id}", response_model=OrderItemEnvelope)
def update_order_item(item_id: int, item_in: OrderItemUpdate, db: DbSession, current_user: CurrentUser):
    item = OrderService(db).update_item(item_id, item_in.model_dump(exclude_unset=True))
    return {"message": "Order item updated", "order_item": item}


@router.delete("/items/{item_id}", response_model=MessageResponse)
def delete_order_item(item_id: int, db: DbSession, current_user: CurrentUser):
    OrderService(db).delete_item(item_id)
    return {"message": "Order item deleted"}


# Orders

@router.post("", response_model=OrderEnvelope, status_code=status.HTTP_201_CREATED)
def create_order(
    order_in: OrderCreate, db: DbSession, app_settings: AppSettings, current_user: CurrentUser
):
    order = OrderService(db, app_settings).create_order(order_in, customer_id=current_user.id)
    return {"message": "Order created successfully", "order": order}


@router.get("", response_model=List[OrderResponse])
def list_orders(
    db: DbSession,
    current_user: CurrentUser,
    status: Optional[OrderStatus] = Query(None),
    order_type: Optional[OrderType] = Query(None, alias="orderType"),
):
    return OrderService(db).list_orders(status=status, order_type=order_type)


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(order_id: int, db: DbSession, current_user: CurrentUser):
    return OrderService(db).get_order(order_id)


@router.put("/{order_id}", response_model=OrderEnvelope)
def update_order(order_id: int, order_in: OrderUpdate, db: DbSession, current_user: CurrentUser):
    order = OrderService(db).update_order(order_id, order_in.model_dump(exclude_unset=True))
    return {"message": "Order updated successfully", "order": order}


@router.delete("/{order_id}", response_model=MessageResponse)
def delete_order(order_id: int, db: DbSession, current_user: CurrentUser):
    OrderService(db).delete_order(order_id)
    return {"message": "Order deleted successfully"}

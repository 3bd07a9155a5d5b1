"""Menu item and stock routes.

Menu item create/update accept either a JSON body or a multipart form with
an optional ``image`` file part.
"""

from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from fastapi import APIRouter, Query, Request, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError as PydanticValidationError

from cafe.core.config import AppSettings
from cafe.core.errors import ValidationError
from cafe.core.file_utils import remove_menu_image, save_menu_image
from cafe.core.rbac import CurrentUser
from cafe.db.session import DbSession
from cafe.models.menu import MenuCategory, StockCategory, StockStatus
from cafe.schemas.base import MessageResponse
from cafe.schemas.menu import (
    MenuItemCreate,
    MenuItemEnvelope,
    MenuItemResponse,
    MenuItemUpdate,
    StockCreate,
    StockEnvelope,
    StockResponse,
    StockUpdate,
)
from cafe.services.menu_service import MenuService, StockService

router = APIRouter()

SchemaT = TypeVar("SchemaT", bound=BaseModel)


async def _read_menu_form(request: Request) -> Tuple[Dict[str, Any], Optional[UploadFile]]:
    """Split the request into plain fields and the optional image part."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        fields: Dict[str, Any] = {}
        image: Optional[UploadFile] = None
        for key, value in form.multi_items():
            if key == "image" and not isinstance(value, str):
                image = value if value.filename else None
            elif isinstance(value, str) and value != "":
                fields[key] = value
        return fields, image

    try:
        body = await request.json()
    except ValueError:
        raise ValidationError("Request body must be JSON or multipart form data")
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body, None


def _validate(schema: Type[SchemaT], fields: Dict[str, Any]) -> SchemaT:
    try:
        return schema.model_validate(fields)
    except PydanticValidationError as e:
        raise RequestValidationError(e.errors())


# Menu items

@router.post(
    "/items",
    response_model=MenuItemEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def create_menu_item(
    request: Request, db: DbSession, app_settings: AppSettings, current_user: CurrentUser
):
    fields, image = await _read_menu_form(request)
    data = _validate(MenuItemCreate, fields)
    if image is not None:
        data.image = await save_menu_image(image, app_settings.upload_dir, app_settings.max_upload_size_bytes)

    try:
        item = MenuService(db).create_item(data)
    except Exception:
        if image is not None:
            remove_menu_image(data.image, app_settings.upload_dir)
        raise
    return {"message": "Menu item created successfully", "menu_item": item}


@router.get("/items", response_model=List[MenuItemResponse])
def list_menu_items(
    db: DbSession,
    category: Optional[MenuCategory] = Query(None),
    available: Optional[bool] = Query(None),
):
    return MenuService(db).list_items(category=category, available=available)


@router.get("/items/{item_id}", response_model=MenuItemResponse)
def get_menu_item(item_id: int, db: DbSession):
    return MenuService(db).get_item(item_id)


@router.put("/items/{item_id}", response_model=MenuItemEnvelope)
async def update_menu_item(
    item_id: int,
    request: Request,
    db: DbSession,
    app_settings: AppSettings,
    current_user: CurrentUser,
):
    service = MenuService(db)
    previous_image = service.get_item(item_id).image

    fields, image = await _read_menu_form(request)
    changes = _validate(MenuItemUpdate, fields).model_dump(exclude_unset=True)
    if image is not None:
        changes["image"] = await save_menu_image(
            image, app_settings.upload_dir, app_settings.max_upload_size_bytes
        )

    try:
        item = service.update_item(item_id, changes)
    except Exception:
        if image is not None:
            remove_menu_image(changes["image"], app_settings.upload_dir)
        raise
    if item.image != previous_image:
        remove_menu_image(previous_image, app_settings.upload_dir)
    return {"message": "Menu item updated successfully", "menu_item": item}


@router.delete("/items/{item_id}", response_model=MessageResponse)
def delete_menu_item(
    item_id: int, db: DbSession, app_settings: AppSettings, current_user: CurrentUser
):
    service = MenuService(db)
    image = service.get_item(item_id).image
    service.delete_item(item_id)
    remove_menu_image(image, app_settings.upload_dir)
    return {"message": "Menu item deleted successfully"}


# Stock - /stock/alerts registered before /stock/{stock_id}

@router.post("/stock", response_model=StockEnvelope, status_code=status.HTTP_201_CREATED)
def create_stock(stock_in: StockCreate, db: DbSession, current_user: CurrentUser):
    stock = StockService(db).create_stock(stock_in)
    return {"message": "Stock item created successfully", "stock": stock}


@router.get("/stock", response_model=List[StockResponse])
def list_stock(
    db: DbSession,
    current_user: CurrentUser,
    status: Optional[StockStatus] = Query(None),
    category: Optional[StockCategory] = Query(None),
):
    return StockService(db).list_stock(status=status, category=category)


@router.get("/stock/alerts", response_model=List[StockResponse])
def list_stock_alerts(db: DbSession, current_user: CurrentUser):
    return StockService(db).list_alerts()


@router.get("/stock/{stock_id}", response_model=StockResponse)
def get_stock(stock_id: int, db: DbSession, current_user: CurrentUser):
    return StockService(db).get_stock(stock_id)


@router.put("/stock/{stock_id}", response_model=StockEnvelope)
def update_stock(stock_id: int, stock_in: StockUpdate, db: DbSession, current_user: CurrentUser):
    stock = StockService(db).update_stock(stock_id, stock_in.model_dump(exclude_unset=True))
    return {"message": "Stock item updated successfully", "stock": stock}


@router.delete("/stock/{stock_id}", response_model=MessageResponse)
def delete_stock(stock_id: int, db: DbSession, current_user: CurrentUser):
    StockService(db).delete_stock(stock_id)
    return {"message": "Stock item deleted successfully"}

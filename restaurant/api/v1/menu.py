import logging
from fastapi import APIRouter, HTTPException, status
from restaurant.core.errors import ServiceError
from restaurant.models.menu import MenuItem
from restaurant.schemas.menu import MenuItemCreate, MenuItemUpdate, MenuItemResponse
from restaurant.schemas.response import SuccessResponse, MessageResponse
from restaurant.services.menu_service import create_menu_item, update_menu_item
from uuid import UUID

router = APIRouter()
log = logging.getLogger("uvicorn")


def _menu_item(menu_item: MenuItem) -> dict:
    return MenuItemResponse.model_validate(menu_item).model_dump(mode="json")


@router.get("/", response_model=SuccessResponse)
async def list_menu_items():
    """Lists every menu item."""
    items = await MenuItem.all().order_by("category", "name")
    return SuccessResponse(data=[_menu_item(item) for item in items])


@router.get("/{menu_item_id}", response_model=SuccessResponse)
async def get_menu_item(menu_item_id: UUID):
    menu_item = await MenuItem.get_or_none(id=menu_item_id)
    if not menu_item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Menu item not found")
    return SuccessResponse(data=_menu_item(menu_item))


# Private (admin)
@router.post("/", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_menu_item_endpoint(item_data: MenuItemCreate):
    """Adds a new menu item. Names are unique."""
    try:
        menu_item = await create_menu_item(item_data.model_dump())
        return SuccessResponse(data=_menu_item(menu_item))
    except ServiceError:
        raise
    except Exception as e:
        log.exception(f"Error creating menu item: {e}")
        raise HTTPException(status_code=500, detail="Server failed to create menu item.")


# Private (admin)
@router.put("/{menu_item_id}", response_model=SuccessResponse)
async def update_menu_item_endpoint(menu_item_id: UUID, item_data: MenuItemUpdate):
    """Partial update; the name is re-checked against every other item."""
    try:
        menu_item = await update_menu_item(menu_item_id, item_data.model_dump(exclude_unset=True))
        return SuccessResponse(data=_menu_item(menu_item))
    except ServiceError:
        raise
    except Exception as e:
        log.exception(f"Error updating menu item {menu_item_id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to update menu item.")


# Private (admin)
@router.delete("/{menu_item_id}", response_model=SuccessResponse)
async def delete_menu_item(menu_item_id: UUID):
    """Removes the item. Orders keep their line items and price snapshots."""
    deleted = await MenuItem.filter(id=menu_item_id).delete()
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Menu item not found")
    return SuccessResponse(data=MessageResponse(message="Menu item removed").model_dump())

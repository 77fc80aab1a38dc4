import logging
from fastapi import APIRouter, HTTPException, status
from restaurant.core.errors import ServiceError
from restaurant.models.inventory import Inventory
from restaurant.schemas.inventory import InventoryItemRequest, InventoryItemUpdate, InventoryResponse
from restaurant.schemas.response import SuccessResponse, MessageResponse
from restaurant.services.inventory_service import create_inventory_item, update_inventory_item
from uuid import UUID

log = logging.getLogger("uvicorn")

router = APIRouter()


def _inventory(inventory: Inventory) -> dict:
    return InventoryResponse.model_validate(inventory).model_dump(mode="json")


@router.get("/", response_model=SuccessResponse)
async def list_inventory():
    """Lists every stock record with its low-stock flag."""
    try:
        records = await Inventory.all().order_by("item_name")
        return SuccessResponse(data=[_inventory(r) for r in records])
    except Exception as e:
        log.exception(f"Error listing inventory: {e}")
        raise HTTPException(status_code=500, detail="Server failed to list inventory.")


@router.get("/{inventory_id}", response_model=SuccessResponse)
async def get_inventory_stock(inventory_id: UUID):
    """Fetches the available stock for a specific inventory record."""
    # FastAPI path converter ensures inventory_id is a valid UUID
    inventory = await Inventory.get_or_none(id=inventory_id)
    if not inventory:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Inventory item not found")
    return SuccessResponse(data=_inventory(inventory))


# Private (admin)
@router.post("/", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def add_inventory_item(item_data: InventoryItemRequest):
    """
    Adds a stock record. Linking it to a menu item makes orders for that item
    draw from this record even if the menu item is later renamed.
    """
    try:
        inventory = await create_inventory_item(item_data.model_dump())
        return SuccessResponse(data=_inventory(inventory))
    except ServiceError:
        # Re-raise domain errors (404 / 400) for the registered handler
        raise
    except Exception as e:
        log.exception(f"Error adding inventory item: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server failed to add inventory item."
        )


# Private (admin/staff)
@router.put("/{inventory_id}", response_model=SuccessResponse)
async def update_inventory_endpoint(inventory_id: UUID, item_data: InventoryItemUpdate):
    """Partial update; re-evaluates the low-stock condition."""
    try:
        inventory = await update_inventory_item(inventory_id, item_data.model_dump(exclude_unset=True))
        return SuccessResponse(data=_inventory(inventory))
    except ServiceError:
        raise
    except Exception as e:
        log.exception(f"Error updating inventory item {inventory_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server failed to update inventory item."
        )


# Private (admin)
@router.delete("/{inventory_id}", response_model=SuccessResponse)
async def delete_inventory_item(inventory_id: UUID):
    deleted = await Inventory.filter(id=inventory_id).delete()
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Inventory item not found")
    return SuccessResponse(data=MessageResponse(message="Inventory item removed").model_dump())

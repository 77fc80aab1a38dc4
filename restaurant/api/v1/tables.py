import logging
from fastapi import APIRouter, HTTPException, status
from restaurant.core.errors import ServiceError
from restaurant.models.table import Table
from restaurant.schemas.response import SuccessResponse, MessageResponse
from restaurant.schemas.table import TableCreate, TableUpdate, TableAvailabilityUpdate, TableResponse
from restaurant.services.table_service import create_table, update_table, update_table_availability
from uuid import UUID

router = APIRouter()
log = logging.getLogger("uvicorn")


def _table(table: Table) -> dict:
    return TableResponse.model_validate(table).model_dump(mode="json")


@router.get("/", response_model=SuccessResponse)
async def list_tables():
    tables = await Table.all().order_by("table_number")
    return SuccessResponse(data=[_table(t) for t in tables])


@router.get("/{table_id}", response_model=SuccessResponse)
async def get_table(table_id: UUID):
    table = await Table.get_or_none(id=table_id)
    if not table:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Table not found")
    return SuccessResponse(data=_table(table))


# Private (admin)
@router.post("/", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_table_endpoint(table_data: TableCreate):
    try:
        table = await create_table(table_data.table_number, table_data.capacity)
        return SuccessResponse(data=_table(table))
    except ServiceError:
        raise
    except Exception as e:
        log.exception(f"Error creating table: {e}")
        raise HTTPException(status_code=500, detail="Server failed to create table.")


# Private (admin)
@router.put("/{table_id}", response_model=SuccessResponse)
async def update_table_endpoint(table_id: UUID, table_data: TableUpdate):
    try:
        table = await update_table(table_id, table_data.model_dump(exclude_unset=True))
        return SuccessResponse(data=_table(table))
    except ServiceError:
        raise
    except Exception as e:
        log.exception(f"Error updating table {table_id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to update table.")


# Private (admin/system)
@router.patch("/{table_id}/availability", response_model=SuccessResponse)
async def update_availability_endpoint(table_id: UUID, payload: TableAvailabilityUpdate):
    """Sets availability directly. This bypasses reservation bookkeeping."""
    try:
        table = await update_table_availability(table_id, payload.is_available)
        return SuccessResponse(data=_table(table))
    except ServiceError:
        raise
    except Exception as e:
        log.exception(f"Error updating availability for table {table_id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to update table availability.")


# Private (admin)
@router.delete("/{table_id}", response_model=SuccessResponse)
async def delete_table(table_id: UUID):
    """Removes the table. Orders and reservations that referenced it are kept."""
    deleted = await Table.filter(id=table_id).delete()
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Table not found")
    return SuccessResponse(data=MessageResponse(message="Table removed").model_dump())

import logging
from datetime import date
from fastapi import APIRouter, HTTPException, status
from restaurant.core.errors import ServiceError
from restaurant.models.reservation import Reservation, ReservationStatus
from restaurant.models.table import Table
from restaurant.schemas.reservation import (
    ReservationRequest,
    ReservationResponse,
    ReservationStatusUpdate,
    ReservationTableSummary,
)
from restaurant.schemas.response import SuccessResponse, MessageResponse
from restaurant.services.reservation_service import (
    create_reservation,
    delete_reservation,
    get_reservation_by_id,
    list_reservations,
    update_reservation_status,
)
from typing import Optional
from uuid import UUID

router = APIRouter()
log = logging.getLogger("uvicorn")


def _reservation(reservation: Reservation, table: Optional[Table] = None) -> dict:
    if table is None and isinstance(reservation.table, Table):
        table = reservation.table
    return ReservationResponse(
        id=reservation.id,
        customer_name=reservation.customer_name,
        phone_number=reservation.phone_number,
        table=ReservationTableSummary.model_validate(table) if table else None,
        date=reservation.date,
        time=reservation.time,
        number_of_guests=reservation.number_of_guests,
        status=reservation.status,
        notes=reservation.notes,
        created_at=reservation.created_at,
        updated_at=reservation.updated_at,
    ).model_dump(mode="json")


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_reservation_endpoint(request_data: ReservationRequest):
    """
    Books a table. With table_id the table is checked for availability, capacity and
    double booking; without it the smallest free table that fits is assigned.
    """
    try:
        reservation = await create_reservation(**request_data.model_dump())
        return SuccessResponse(data=_reservation(reservation))
    except ServiceError as e:
        log.error(f"Rejected reservation: {e}")
        raise
    except Exception as e:
        log.exception(f"Error creating reservation: {e}")
        raise HTTPException(status_code=500, detail="Server failed to create reservation.")


@router.get("/", response_model=SuccessResponse)
async def list_reservations_endpoint(
    date: Optional[date] = None,
    status: Optional[ReservationStatus] = None,
    table_id: Optional[UUID] = None,
):
    """Lists reservations sorted by date then time, with optional filters."""
    try:
        reservations = await list_reservations(date=date, status=status, table_id=table_id)
        return SuccessResponse(data=[_reservation(r) for r in reservations])
    except Exception as e:
        log.exception(f"Error listing reservations: {e}")
        raise HTTPException(status_code=500, detail="Server failed to list reservations.")


@router.get("/{reservation_id}", response_model=SuccessResponse)
async def get_reservation_endpoint(reservation_id: UUID):
    reservation = await get_reservation_by_id(reservation_id)
    if not reservation:
        raise HTTPException(status_code=404, detail="Reservation not found")
    return SuccessResponse(data=_reservation(reservation))


@router.patch("/{reservation_id}/status", response_model=SuccessResponse)
async def update_reservation_status_endpoint(reservation_id: UUID, payload: ReservationStatusUpdate):
    """Confirming holds the table; cancelling or completing releases it."""
    try:
        reservation = await update_reservation_status(reservation_id, payload.status)
        table = await Table.get_or_none(id=reservation.table_id) if reservation.table_id else None
        return SuccessResponse(data=_reservation(reservation, table))
    except ServiceError as e:
        log.error(f"Rejected reservation status update: {e}")
        raise
    except Exception as e:
        log.exception(f"Error updating reservation status: {e}")
        raise HTTPException(status_code=500, detail="Server failed to update reservation status.")


@router.delete("/{reservation_id}", response_model=SuccessResponse)
async def delete_reservation_endpoint(reservation_id: UUID):
    try:
        await delete_reservation(reservation_id)
        return SuccessResponse(data=MessageResponse(message="Reservation removed").model_dump())
    except ServiceError:
        raise
    except Exception as e:
        log.exception(f"Error deleting reservation {reservation_id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to delete reservation.")

import uuid
import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict

from restaurant.models.reservation import ReservationStatus


class ReservationRequest(BaseModel):
    """
    Reservation request body. Required fields are checked by the reservation
    engine so that a missing field yields a single descriptive error. Leave
    table_id out to have a table assigned automatically.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    customer_name: Optional[str] = None
    phone_number: Optional[str] = None
    date: Optional[dt.date] = None
    time: Optional[str] = None
    number_of_guests: Optional[int] = None
    table_id: Optional[uuid.UUID] = None
    notes: Optional[str] = None


class ReservationStatusUpdate(BaseModel):
    status: ReservationStatus


class ReservationTableSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    table_number: int
    capacity: int
    is_available: bool


class ReservationResponse(BaseModel):
    id: uuid.UUID
    customer_name: str
    phone_number: str
    table: Optional[ReservationTableSummary] = None
    date: dt.date
    time: str
    number_of_guests: int
    status: ReservationStatus
    notes: Optional[str] = None
    created_at: dt.datetime
    updated_at: dt.datetime

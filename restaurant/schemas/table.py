import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TableCreate(BaseModel):
    table_number: int = Field(..., ge=1, description="Unique number shown on the table.")
    capacity: int = Field(..., ge=1, description="Number of seats.")


class TableUpdate(BaseModel):
    table_number: Optional[int] = Field(None, ge=1)
    capacity: Optional[int] = Field(None, ge=1)
    is_available: Optional[bool] = None


class TableAvailabilityUpdate(BaseModel):
    """Explicit boolean is required."""
    is_available: bool


class TableResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    table_number: int
    capacity: int
    is_available: bool
    created_at: datetime
    updated_at: datetime

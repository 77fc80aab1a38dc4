
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from restaurant.models.inventory import StockUnit


class InventoryItemRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    item_name: str = Field(..., min_length=1, description="Unique stock item name (e.g., Margherita Pizza).")
    quantity: Decimal = Field(..., ge=0, description="Initial available stock quantity.")
    unit: StockUnit
    min_stock_level: Decimal = Field(Decimal("0"), ge=0, description="Stock level at or below which an alert is raised.")
    menu_item_id: Optional[uuid.UUID] = Field(None, description="Menu item whose orders draw from this stock.")

class InventoryItemUpdate(BaseModel):
    """Partial update: omitted fields keep their current value."""
    model_config = ConfigDict(str_strip_whitespace=True)

    item_name: Optional[str] = Field(None, min_length=1)
    quantity: Optional[Decimal] = Field(None, ge=0)
    unit: Optional[StockUnit] = None
    min_stock_level: Optional[Decimal] = Field(None, ge=0)
    menu_item_id: Optional[uuid.UUID] = None

class InventoryResponse(BaseModel):
    """Schema for fetching inventory stock."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    item_name: str
    menu_item_id: Optional[uuid.UUID] = None
    quantity: Decimal
    unit: StockUnit
    min_stock_level: Decimal
    is_low_stock: bool
    last_updated: Optional[datetime] = None
    updated_at: datetime

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from restaurant.models.menu import MenuCategory


class MenuItemCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, description="Unique menu item name (e.g., Margherita Pizza).")
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0, description="Selling price of the item.")
    category: MenuCategory
    is_available: bool = Field(True, description="Whether the item can currently be ordered.")
    image_url: Optional[str] = None


class MenuItemUpdate(BaseModel):
    """Partial update: omitted fields keep their current value."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    category: Optional[MenuCategory] = None
    is_available: Optional[bool] = None
    image_url: Optional[str] = None


class MenuItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: Optional[str] = None
    price: Decimal
    category: MenuCategory
    is_available: bool
    image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

from pydantic import BaseModel
from typing import List, Optional
import uuid
from datetime import datetime
from decimal import Decimal

from restaurant.models.menu import MenuCategory
from restaurant.models.order import OrderStatus

class OrderItemRequest(BaseModel):
    """Schema for a single item in the order request."""
    menu_item_id: uuid.UUID
    quantity: int

class OrderRequest(BaseModel):
    """Schema for the full order placement request body."""
    table_id: Optional[uuid.UUID] = None
    items: List[OrderItemRequest] = []

class OrderStatusUpdate(BaseModel):
    """Schema for updating an order status."""
    status: OrderStatus

class OrderTableSummary(BaseModel):
    id: uuid.UUID
    table_number: int
    capacity: int

class OrderMenuItemSummary(BaseModel):
    id: uuid.UUID
    name: str
    price: Decimal
    category: MenuCategory

class OrderItemResponse(BaseModel):
    """Schema for a line item inside the detailed order response."""
    menu_item: Optional[OrderMenuItemSummary] = None  # None once the menu item is deleted
    quantity: int
    price_at_order: Decimal
    line_total: Decimal

class OrderDetailResponse(BaseModel):
    """Schema for fetching detailed order information."""
    id: uuid.UUID
    table: Optional[OrderTableSummary] = None
    items: List[OrderItemResponse]
    total_amount: Decimal
    status: OrderStatus
    order_time: datetime
    completion_time: Optional[datetime] = None

class OrderPlacementResponse(BaseModel):
    """Response schema for order creation and status changes."""
    order_id: uuid.UUID
    status: OrderStatus
    total_amount: Decimal
    completion_time: Optional[datetime] = None
    message: str

# restaurant/models/__init__.py
from .menu import MenuItem, MenuCategory
from .table import Table
from .order import Order, OrderItem, OrderStatus
from .reservation import Reservation, ReservationStatus, ACTIVE_RESERVATION_STATUSES
from .inventory import Inventory, StockUnit
from .outbox import OutboxEvent

# Export all models
__all__ = [
    "ACTIVE_RESERVATION_STATUSES",
    "Inventory",
    "MenuCategory",
    "MenuItem",
    "Order",
    "OrderItem",
    "OrderStatus",
    "OutboxEvent",
    "Reservation",
    "ReservationStatus",
    "StockUnit",
    "Table",
]

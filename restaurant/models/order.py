from enum import Enum
from tortoise import fields, models
import uuid


class OrderStatus(str, Enum):
    PENDING = "pending"  # Initial state, inventory already decremented
    PREPARING = "preparing"
    COMPLETED = "completed"  # Stamps completion_time
    CANCELLED = "cancelled"  # Restocks inventory


class Order(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    # Non-owning: deleting the table keeps the order
    table = fields.ForeignKeyField(
        "models.Table", related_name="orders", null=True, on_delete=fields.SET_NULL
    )
    status = fields.CharEnumField(OrderStatus, default=OrderStatus.PENDING)
    total_amount = fields.DecimalField(max_digits=14, decimal_places=2, default=0)
    order_time = fields.DatetimeField(auto_now_add=True)
    completion_time = fields.DatetimeField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "orders"
        indexes = [
            ("table_id",),               # Table order queries
            ("status",),                 # Status-based filtering
            ("status", "order_time"),    # Composite: status with time
        ]


class OrderItem(models.Model):
    """Line item. price_at_order is a snapshot and never changes after creation."""
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    order = fields.ForeignKeyField("models.Order", related_name="items")
    menu_item = fields.ForeignKeyField(
        "models.MenuItem", related_name="order_items", null=True, on_delete=fields.SET_NULL
    )
    position = fields.IntField(default=0)
    quantity = fields.IntField()
    price_at_order = fields.DecimalField(max_digits=12, decimal_places=2)
    line_total = fields.DecimalField(max_digits=14, decimal_places=2)

    class Meta:
        table = "order_items"
        indexes = [
            ("order_id",),              # Order line items
            ("menu_item_id",),          # Menu item popularity
        ]

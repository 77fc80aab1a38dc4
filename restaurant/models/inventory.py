from enum import Enum
from tortoise import fields, models
import uuid


class StockUnit(str, Enum):
    KG = "kg"
    GRAMS = "grams"
    LITERS = "liters"
    ML = "ml"
    PIECES = "pieces"
    PACKS = "packs"
    OTHER = "other"


class Inventory(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    item_name = fields.CharField(max_length=255, unique=True)
    # Stable key for stock adjustments; item_name is only the fallback match
    menu_item = fields.OneToOneField(
        "models.MenuItem", related_name="inventory", null=True, on_delete=fields.SET_NULL
    )
    quantity = fields.DecimalField(max_digits=12, decimal_places=3)
    unit = fields.CharEnumField(StockUnit, max_length=16)
    min_stock_level = fields.DecimalField(max_digits=12, decimal_places=3, default=0) # For low stock alert
    last_updated = fields.DatetimeField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "inventory"

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.min_stock_level

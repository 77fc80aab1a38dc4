from enum import Enum
from tortoise import fields, models
import uuid


class MenuCategory(str, Enum):
    APPETIZER = "Appetizer"
    MAIN_COURSE = "Main Course"
    DESSERT = "Dessert"
    BEVERAGE = "Beverage"
    OTHER = "Other"


class MenuItem(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    name = fields.CharField(max_length=255, unique=True)
    description = fields.TextField(null=True)
    price = fields.DecimalField(max_digits=12, decimal_places=2)
    category = fields.CharEnumField(MenuCategory, max_length=32)
    is_available = fields.BooleanField(default=True)
    image_url = fields.CharField(max_length=1024, null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "menu_items"
        indexes = [
            ("is_available",),  # Filter orderable items
            ("category",),
        ]

    def __str__(self):
        return self.name

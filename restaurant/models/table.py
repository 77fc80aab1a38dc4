from tortoise import fields, models
import uuid


class Table(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    table_number = fields.IntField(unique=True)
    capacity = fields.IntField()
    # Sole gate checked by reservation creation; written through table_service
    is_available = fields.BooleanField(default=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "restaurant_tables"
        indexes = [
            ("is_available", "capacity"),  # Composite: auto-assignment candidates
        ]

    def __str__(self):
        return f"Table {self.table_number}"

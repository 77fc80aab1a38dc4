from enum import Enum
from tortoise import fields, models
import uuid


class ReservationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"  # Holds the table (table.is_available = False)
    CANCELLED = "cancelled"
    COMPLETED = "completed"


# Statuses that count toward booking conflicts
ACTIVE_RESERVATION_STATUSES = (ReservationStatus.PENDING, ReservationStatus.CONFIRMED)


class Reservation(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    customer_name = fields.CharField(max_length=255)
    phone_number = fields.CharField(max_length=32)
    table = fields.ForeignKeyField(
        "models.Table", related_name="reservations", null=True, on_delete=fields.SET_NULL
    )
    date = fields.DateField()
    time = fields.CharField(max_length=16)
    number_of_guests = fields.IntField()
    status = fields.CharEnumField(ReservationStatus, default=ReservationStatus.PENDING)
    notes = fields.TextField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "reservations"
        indexes = [
            ("table_id", "date", "time", "status"),  # Booking conflict lookups
            ("date", "time"),                        # Listing order
        ]

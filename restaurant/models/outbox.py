from tortoise import fields, models
import uuid


class OutboxEvent(models.Model):
    """
    Observational signals (low stock, status changes) recorded in the same
    transaction as the change that raised them. The alert poller drains them.
    """
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    aggregate_type = fields.CharField(max_length=64) # e.g., 'inventory', 'order', 'reservation'
    aggregate_id = fields.UUIDField(null=True) # ID of the entity that generated the event
    event_type = fields.CharField(max_length=128) # e.g., 'inventory.low_stock_alert.v1'
    payload = fields.JSONField()
    published = fields.BooleanField(default=False)
    attempts = fields.IntField(default=0)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "outbox_events"
        indexes = [
            ("published", "attempts"),  # Poller batch selection
        ]

from typing import Dict, Any, Optional
from restaurant.models.outbox import OutboxEvent
from uuid import UUID

LOW_STOCK_ALERT = "inventory.low_stock_alert.v1"
ORDER_STATUS_CHANGED = "order.status_changed.v1"
RESERVATION_STATUS_CHANGED = "reservation.status_changed.v1"


async def create_outbox_event(
    aggregate_type: str,
    aggregate_id: Optional[UUID],
    event_type: str,
    payload: Dict[str, Any],
    conn: Any = None
) -> OutboxEvent:
    """
    Creates a new Outbox event record using the provided database connection (transaction).

    Passing 'conn' makes the event commit or roll back together with the business data.
    """
    return await OutboxEvent.create(
        aggregate_type=aggregate_type,
        aggregate_id=aggregate_id,
        event_type=event_type,
        payload=payload,
        published=False,
        attempts=0,
        using_db=conn
    )

import asyncio
import logging
from typing import Awaitable, Callable, Dict

from restaurant.core.config import BATCH_SIZE, LOG_FORMAT, LOG_LEVEL, MAX_ATTEMPTS, POLLING_INTERVAL
from restaurant.core.db import close_db, init_db
from restaurant.events.outbox_utility import LOW_STOCK_ALERT, ORDER_STATUS_CHANGED, RESERVATION_STATUS_CHANGED
from restaurant.models.outbox import OutboxEvent

log = logging.getLogger("outbox_poller")
alerts = logging.getLogger("restaurant.alerts")


async def handle_low_stock_alert(event: OutboxEvent) -> None:
    payload = event.payload
    alerts.warning(
        f"!!! LOW STOCK !!! {payload.get('item_name')} has {payload.get('quantity')} "
        f"{payload.get('unit')} left (minimum {payload.get('min_stock_level')})."
    )


async def handle_order_status_changed(event: OutboxEvent) -> None:
    payload = event.payload
    alerts.info(
        f"Order {payload.get('order_id')} status: {payload.get('old_status')} -> {payload.get('new_status')}"
    )


async def handle_reservation_status_changed(event: OutboxEvent) -> None:
    payload = event.payload
    alerts.info(
        f"Reservation {payload.get('reservation_id')} status: "
        f"{payload.get('old_status')} -> {payload.get('new_status')}"
    )


HANDLERS: Dict[str, Callable[[OutboxEvent], Awaitable[None]]] = {
    LOW_STOCK_ALERT: handle_low_stock_alert,
    ORDER_STATUS_CHANGED: handle_order_status_changed,
    RESERVATION_STATUS_CHANGED: handle_reservation_status_changed,
}


async def dispatch_event(event: OutboxEvent) -> None:
    """Routes an OutboxEvent to the handler registered for its type."""
    log.debug(f"Poller DISPATCHING: {event.event_type} (ID: {event.id.hex[:8]}...)")
    handler = HANDLERS.get(event.event_type)
    if handler is None:
        log.warning(f"No handler found for event type: {event.event_type}")
        return
    await handler(event)


async def poll_outbox_for_new_events() -> int:
    """
    Queries the Outbox table for unpublished events and attempts to dispatch them.
    Returns the number of events published in this pass.
    """
    # Select events that haven't been published and haven't exceeded max attempts
    events = await OutboxEvent.filter(published=False, attempts__lt=MAX_ATTEMPTS).limit(BATCH_SIZE).order_by('created_at')

    published = 0
    for event in events:
        try:
            await dispatch_event(event)
            event.published = True
            await event.save(update_fields=['published'])
            published += 1
        except Exception:
            # Increment attempts on failure and save
            event.attempts += 1
            await event.save(update_fields=['attempts'])
            log.exception(f"Dispatch failed for event {event.id} (attempt {event.attempts}/{MAX_ATTEMPTS}).")
    return published


async def start_outbox_poller():
    """Main loop for the poller service."""
    await init_db()
    log.info("--- Alert Poller Service Started ---")

    try:
        while True:
            try:
                await poll_outbox_for_new_events()
            except Exception as e:
                log.error(f"Poller encountered a critical DB error: {e}.")

            await asyncio.sleep(POLLING_INTERVAL)
    finally:
        await close_db()


if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    try:
        asyncio.run(start_outbox_poller())
    except KeyboardInterrupt:
        log.info("Poller service stopped.")

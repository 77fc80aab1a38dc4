import logging
from tortoise import timezone
from tortoise.transactions import in_transaction
from typing import List, Dict, Optional, Any, Union
from decimal import Decimal
from restaurant.core.errors import ConflictError, InvalidArgumentError, NotFoundError
from restaurant.events.outbox_utility import ORDER_STATUS_CHANGED, create_outbox_event
from restaurant.models.menu import MenuItem
from restaurant.models.order import Order, OrderItem, OrderStatus
from restaurant.models.table import Table
from restaurant.services.identifiers import parse_id
from restaurant.services.inventory_service import adjust_inventory
from restaurant.services.transitions import ORDER_TRANSITIONS, coerce_status, ensure_transition
from uuid import UUID

log = logging.getLogger("order_service")

UNKNOWN_ITEM = "Unknown Item"


async def place_order(table_id: Optional[UUID], items: List[Dict[str, Any]]) -> Order:
    """
    Validates the table and every requested item, snapshots prices, persists the
    order and decrements stock, all in one transaction.

    Checks run per item in request order: existence, availability, quantity.
    """
    if not table_id or not items:
        raise InvalidArgumentError("Please provide table_id and at least one item.")
    table_id = parse_id(table_id, "table")

    async with in_transaction() as conn:
        table = await Table.get_or_none(id=table_id).using_db(conn)
        if not table:
            raise NotFoundError("Table not found")

        total = Decimal("0")
        lines = []
        stock_changes = []

        menu_ids = [parse_id(it.get("menu_item_id"), "menu item") for it in items]
        # Locked in id order in a single query
        menus = {
            m.id: m for m in await MenuItem.filter(id__in=menu_ids).order_by("id").select_for_update().using_db(conn)
        }

        for it, mid in zip(items, menu_ids):
            menu = menus.get(mid)
            if not menu:
                raise NotFoundError(f"Menu item with ID {mid} not found.")
            if not menu.is_available:
                raise ConflictError(f"{menu.name} is currently not available.")
            qty = int(it.get("quantity") or 0)
            if qty <= 0:
                raise InvalidArgumentError(f"Quantity for {menu.name} must be at least 1.")

            line_total = menu.price * qty
            total += line_total
            lines.append((menu, qty, line_total))
            stock_changes.append({"menu_item_id": menu.id, "name": menu.name, "quantity": qty})

        order = await Order.create(
            table=table,
            status=OrderStatus.PENDING,
            total_amount=total,
            using_db=conn
        )
        for position, (menu, qty, line_total) in enumerate(lines):
            await OrderItem.create(
                order=order,
                menu_item=menu,
                position=position,
                quantity=qty,
                price_at_order=menu.price,
                line_total=line_total,
                using_db=conn
            )

        await adjust_inventory(stock_changes, decrement=True, conn=conn, triggered_by=order.id)

    await order.fetch_related("table", "items", "items__menu_item")
    log.info(f"Order {order.id} placed for table {table.table_number}: {len(lines)} item(s), total {total}.")
    return order


async def get_order_by_id(order_id: Union[UUID, str]) -> Optional[Order]:
    """Fetches order details with table and line items, including the menu item name/price."""
    order_id = parse_id(order_id, "order")
    # Pre-fetch related entities to minimize DB queries (N+1 avoidance)
    return await Order.get_or_none(id=order_id).prefetch_related('table', 'items', 'items__menu_item')


async def list_orders(status: Union[OrderStatus, str, None] = None) -> List[Order]:
    query = Order.all()
    if status:
        query = query.filter(status=coerce_status(OrderStatus, status))
    return await query.order_by('-order_time').prefetch_related('table', 'items', 'items__menu_item')


async def _restock_lines(order: Order, conn: Any) -> None:
    lines = await OrderItem.filter(order_id=order.id).using_db(conn)
    menu_ids = [line.menu_item_id for line in lines if line.menu_item_id]
    menu_map = {m.id: m for m in await MenuItem.filter(id__in=menu_ids).using_db(conn)} if menu_ids else {}

    items_to_return = []
    for line in lines:
        menu = menu_map.get(line.menu_item_id)
        items_to_return.append({
            "menu_item_id": menu.id if menu else None,
            "name": menu.name if menu else UNKNOWN_ITEM,
            "quantity": line.quantity,
        })
    await adjust_inventory(items_to_return, decrement=False, conn=conn, triggered_by=order.id)


async def update_order_status(order_id: Union[UUID, str], new_status: Union[OrderStatus, str]) -> Order:
    """
    Moves an order along the status graph.

    Entering COMPLETED stamps completion_time; entering CANCELLED returns every
    line's quantity to stock. Both happen in the status write's transaction.
    """
    order_id = parse_id(order_id, "order")
    new_status = coerce_status(OrderStatus, new_status)

    async with in_transaction() as conn:
        order = await Order.filter(id=order_id).select_for_update().using_db(conn).first()
        if not order:
            raise NotFoundError("Order not found")

        old_status = order.status
        ensure_transition(ORDER_TRANSITIONS, old_status, new_status, "Order")
        if old_status == new_status:
            return order

        order.status = new_status
        if new_status == OrderStatus.COMPLETED:
            order.completion_time = timezone.now()
        if new_status == OrderStatus.CANCELLED:
            await _restock_lines(order, conn)
        await order.save(using_db=conn)

        await create_outbox_event(
            aggregate_type="order",
            aggregate_id=order.id,
            event_type=ORDER_STATUS_CHANGED,
            payload={
                "order_id": str(order.id),
                "old_status": old_status.value,
                "new_status": new_status.value,
            },
            conn=conn
        )

    log.info(f"Order {order.id} moved from {old_status.value} to {new_status.value}.")
    return order


async def delete_order(order_id: Union[UUID, str]) -> None:
    """Hard delete. Stock is not returned; cancel first to restock."""
    order_id = parse_id(order_id, "order")
    async with in_transaction() as conn:
        order = await Order.get_or_none(id=order_id).using_db(conn)
        if not order:
            raise NotFoundError("Order not found")
        await OrderItem.filter(order_id=order_id).using_db(conn).delete()
        await order.delete(using_db=conn)
    log.info(f"Order {order_id} removed.")

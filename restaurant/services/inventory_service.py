import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from tortoise import timezone
from tortoise.transactions import in_transaction

from restaurant.core.errors import ConflictError, NotFoundError
from restaurant.events.outbox_utility import LOW_STOCK_ALERT, create_outbox_event
from restaurant.models.inventory import Inventory, StockUnit
from restaurant.models.menu import MenuItem
from restaurant.services.identifiers import parse_id

log = logging.getLogger("inventory_service")

ZERO = Decimal("0")


async def check_for_low_stock(inventory: Inventory, conn: Any = None, triggered_by: Optional[UUID] = None) -> bool:
    """Checks if current stock is at or below its minimum and records an alert if so."""
    if not inventory.is_low_stock:
        return False

    log.warning(
        f"LOW STOCK ALERT: {inventory.item_name} is at {inventory.quantity} {inventory.unit.value}"
    )
    await create_outbox_event(
        aggregate_type="inventory",
        aggregate_id=inventory.id,
        event_type=LOW_STOCK_ALERT,
        payload={
            "item_name": inventory.item_name,
            "quantity": str(inventory.quantity),
            "unit": inventory.unit.value,
            "min_stock_level": str(inventory.min_stock_level),
            "triggered_by": str(triggered_by) if triggered_by else None,
        },
        conn=conn
    )
    return True


async def _find_stock_record(item: Dict[str, Any], conn: Any) -> Optional[Inventory]:
    # Linked records win; the name match only covers records with no menu item link
    menu_item_id = item.get("menu_item_id")
    if menu_item_id:
        linked = await Inventory.filter(menu_item_id=menu_item_id).select_for_update().using_db(conn).first()
        if linked:
            return linked
    return await Inventory.filter(
        item_name=item["name"], menu_item_id__isnull=True
    ).select_for_update().using_db(conn).first()


def _lock_order(item: Dict[str, Any]):
    menu_item_id = item.get("menu_item_id")
    return (str(menu_item_id) if menu_item_id else "", item["name"])


async def adjust_inventory(
    items: List[Dict[str, Any]],
    decrement: bool = True,
    conn: Any = None,
    triggered_by: Optional[UUID] = None,
) -> List[Inventory]:
    """
    Applies quantity deltas to stock records.

    Each item is ``{"menu_item_id": ..., "name": ..., "quantity": ...}``. A
    missing record is skipped with a warning and the rest of the batch still
    runs. Quantities are clamped at zero; the negative remainder is dropped.

    Records are locked and adjusted in a fixed key order, not request order.
    """
    adjusted = []
    for item in sorted(items, key=_lock_order):
        inventory = await _find_stock_record(item, conn)
        if not inventory:
            log.warning(f'Inventory item "{item["name"]}" not found. Cannot update inventory.')
            continue

        delta = Decimal(str(item["quantity"]))
        if decrement:
            new_qty = inventory.quantity - delta
        else:
            new_qty = inventory.quantity + delta

        if new_qty < ZERO:
            log.warning(f"Inventory for {inventory.item_name} went below zero. Set to 0.")
            new_qty = ZERO

        inventory.quantity = new_qty
        inventory.last_updated = timezone.now()
        await inventory.save(using_db=conn)
        await check_for_low_stock(inventory, conn=conn, triggered_by=triggered_by)
        adjusted.append(inventory)

    return adjusted


async def _resolve_menu_link(menu_item_id, conn, exclude_inventory_id: Optional[UUID] = None) -> MenuItem:
    menu_item = await MenuItem.get_or_none(id=parse_id(menu_item_id, "menu item")).using_db(conn)
    if not menu_item:
        raise NotFoundError(f"Menu item with ID {menu_item_id} not found.")
    linked = Inventory.filter(menu_item_id=menu_item.id)
    if exclude_inventory_id:
        linked = linked.exclude(id=exclude_inventory_id)
    if await linked.using_db(conn).exists():
        raise ConflictError(f"{menu_item.name} already has an inventory record.")
    return menu_item


async def create_inventory_item(data: Dict[str, Any]) -> Inventory:
    """Adds a stock record; item_name must be unique."""
    async with in_transaction() as conn:
        if await Inventory.filter(item_name=data["item_name"]).using_db(conn).exists():
            raise ConflictError("Inventory item with this name already exists")

        menu_item = None
        if data.get("menu_item_id"):
            menu_item = await _resolve_menu_link(data["menu_item_id"], conn)

        inventory = await Inventory.create(
            item_name=data["item_name"],
            menu_item=menu_item,
            quantity=Decimal(str(data["quantity"])),
            unit=StockUnit(data["unit"]),
            min_stock_level=Decimal(str(data.get("min_stock_level") or 0)),
            last_updated=timezone.now(),
            using_db=conn
        )
        await check_for_low_stock(inventory, conn=conn)

    log.info(f"Inventory item '{inventory.item_name}' created with {inventory.quantity} {inventory.unit.value}.")
    return inventory


async def update_inventory_item(inventory_id, fields: Dict[str, Any]) -> Inventory:
    """
    Partial update. Only the supplied fields change; the name is re-checked
    against every other record and the low-stock condition is re-evaluated.
    """
    inventory_id = parse_id(inventory_id, "inventory item")
    async with in_transaction() as conn:
        inventory = await Inventory.filter(id=inventory_id).select_for_update().using_db(conn).first()
        if not inventory:
            raise NotFoundError("Inventory item not found")

        item_name = fields.get("item_name")
        if item_name and item_name != inventory.item_name:
            taken = await Inventory.filter(item_name=item_name).exclude(id=inventory_id).using_db(conn).exists()
            if taken:
                raise ConflictError("Inventory item with this name already exists")
            inventory.item_name = item_name

        if "menu_item_id" in fields:
            if fields["menu_item_id"] is None:
                inventory.menu_item_id = None
            else:
                menu_item = await _resolve_menu_link(fields["menu_item_id"], conn, exclude_inventory_id=inventory_id)
                inventory.menu_item_id = menu_item.id

        if fields.get("quantity") is not None:
            inventory.quantity = Decimal(str(fields["quantity"]))
        if fields.get("unit") is not None:
            inventory.unit = StockUnit(fields["unit"])
        if fields.get("min_stock_level") is not None:
            inventory.min_stock_level = Decimal(str(fields["min_stock_level"]))

        inventory.last_updated = timezone.now()
        await inventory.save(using_db=conn)
        await check_for_low_stock(inventory, conn=conn)

    return inventory

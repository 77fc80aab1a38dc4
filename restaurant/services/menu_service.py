import logging
from decimal import Decimal
from typing import Any, Dict

from tortoise.transactions import in_transaction

from restaurant.core.errors import ConflictError, NotFoundError
from restaurant.models.menu import MenuCategory, MenuItem
from restaurant.services.identifiers import parse_id

log = logging.getLogger("menu_service")

UPDATABLE_FIELDS = ("description", "is_available", "image_url")


async def create_menu_item(data: Dict[str, Any]) -> MenuItem:
    async with in_transaction() as conn:
        if await MenuItem.filter(name=data["name"]).using_db(conn).exists():
            raise ConflictError("Menu item with this name already exists")
        menu_item = await MenuItem.create(
            name=data["name"],
            description=data.get("description"),
            price=Decimal(str(data["price"])),
            category=MenuCategory(data["category"]),
            is_available=data.get("is_available", True),
            image_url=data.get("image_url"),
            using_db=conn
        )
    log.info(f"Menu item '{menu_item.name}' created at {menu_item.price}.")
    return menu_item


async def update_menu_item(menu_item_id, fields: Dict[str, Any]) -> MenuItem:
    """
    Partial update. Price edits never touch existing orders, whose line items
    keep their own price snapshot.
    """
    menu_item_id = parse_id(menu_item_id, "menu item")
    async with in_transaction() as conn:
        menu_item = await MenuItem.filter(id=menu_item_id).select_for_update().using_db(conn).first()
        if not menu_item:
            raise NotFoundError("Menu item not found")

        name = fields.get("name")
        if name and name != menu_item.name:
            taken = await MenuItem.filter(name=name).exclude(id=menu_item_id).using_db(conn).exists()
            if taken:
                raise ConflictError("Menu item with this name already exists")
            menu_item.name = name

        for field in UPDATABLE_FIELDS:
            if fields.get(field) is not None:
                setattr(menu_item, field, fields[field])
        if fields.get("price") is not None:
            menu_item.price = Decimal(str(fields["price"]))
        if fields.get("category") is not None:
            menu_item.category = MenuCategory(fields["category"])

        await menu_item.save(using_db=conn)
    return menu_item

# restaurant/scripts/seed_data.py
import asyncio
import logging
from decimal import Decimal

from restaurant.core.config import LOG_FORMAT, LOG_LEVEL
from restaurant.core.db import init_db, close_db
from restaurant.models.inventory import Inventory, StockUnit
from restaurant.models.menu import MenuCategory, MenuItem
from restaurant.models.table import Table

log = logging.getLogger("seed_data")

TABLES = [(1, 2), (2, 4), (3, 6)]

MENU = [
    # name, price, category, initial stock, min stock
    ("Bruschetta", "7.50", MenuCategory.APPETIZER, 40, 5),
    ("Margherita Pizza", "12.00", MenuCategory.MAIN_COURSE, 30, 5),
    ("Tiramisu", "6.50", MenuCategory.DESSERT, 20, 4),
    ("Lemonade", "3.00", MenuCategory.BEVERAGE, 100, 10),
]


async def seed():
    for number, capacity in TABLES:
        table, _ = await Table.get_or_create(table_number=number, defaults={"capacity": capacity})
        log.info(f"Table {table.table_number}: {table.id}")

    for name, price, category, stock, minimum in MENU:
        menu_item, _ = await MenuItem.get_or_create(
            name=name, defaults={"price": Decimal(price), "category": category, "is_available": True}
        )
        inventory, _ = await Inventory.get_or_create(
            item_name=name,
            defaults={
                "menu_item": menu_item,
                "quantity": Decimal(stock),
                "unit": StockUnit.PIECES,
                "min_stock_level": Decimal(minimum),
            },
        )
        # If existing, reset quantities (idempotent)
        inventory.quantity = Decimal(stock)
        await inventory.save()
        log.info(f"Menu item {menu_item.name}: {menu_item.id} (stock {stock})")

    log.info("Seed data loaded.")


async def main():
    await init_db()
    try:
        await seed()
    finally:
        await close_db()

if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    asyncio.run(main())

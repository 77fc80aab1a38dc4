from decimal import Decimal

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from restaurant.core.db import MODELS_MODULES
from restaurant.models import Inventory, MenuCategory, MenuItem, StockUnit, Table

TEST_DB_URL = "sqlite://:memory:"


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory SQLite schema per test."""
    await Tortoise.init(db_url=TEST_DB_URL, modules={"models": MODELS_MODULES})
    await Tortoise.generate_schemas()
    yield
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def tables(db):
    """Tables 1, 2 and 3 seating 2, 4 and 6."""
    return [
        await Table.create(table_number=number, capacity=capacity)
        for number, capacity in [(1, 2), (2, 4), (3, 6)]
    ]


@pytest_asyncio.fixture
async def menu(db):
    pizza = await MenuItem.create(
        name="Margherita Pizza", price=Decimal("12.50"), category=MenuCategory.MAIN_COURSE
    )
    lemonade = await MenuItem.create(
        name="Lemonade", price=Decimal("3.00"), category=MenuCategory.BEVERAGE
    )
    return {"pizza": pizza, "lemonade": lemonade}


@pytest_asyncio.fixture
async def stock(menu):
    """Pizza stock is linked by menu item id; lemonade stock is matched by name."""
    pizza_stock = await Inventory.create(
        item_name="Margherita Pizza",
        menu_item=menu["pizza"],
        quantity=Decimal("10"),
        unit=StockUnit.PIECES,
        min_stock_level=Decimal("2"),
    )
    lemonade_stock = await Inventory.create(
        item_name="Lemonade",
        quantity=Decimal("20"),
        unit=StockUnit.LITERS,
        min_stock_level=Decimal("0"),
    )
    return {"pizza": pizza_stock, "lemonade": lemonade_stock}


@pytest_asyncio.fixture
async def client(db):
    from restaurant.main import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

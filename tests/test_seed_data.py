from decimal import Decimal

import pytest

from restaurant.models import Inventory, MenuItem, Table
from restaurant.scripts.seed_data import MENU, TABLES, seed


@pytest.mark.asyncio
async def test_seed_is_repeatable(db):
    await seed()
    pizza_stock = await Inventory.get(item_name="Margherita Pizza")
    pizza_stock.quantity = Decimal("1")
    await pizza_stock.save()

    await seed()

    assert await Table.all().count() == len(TABLES)
    assert await MenuItem.all().count() == len(MENU)
    restored = await Inventory.get(item_name="Margherita Pizza")
    assert restored.quantity == Decimal("30")
    assert restored.menu_item_id == (await MenuItem.get(name="Margherita Pizza")).id

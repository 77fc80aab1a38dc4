import logging
from typing import Any, Dict, Optional
from uuid import UUID

from tortoise.transactions import in_transaction

from restaurant.core.errors import ConflictError, NotFoundError
from restaurant.models.table import Table
from restaurant.services.identifiers import parse_id

log = logging.getLogger("table_service")


async def lock_table(table_id: UUID, conn: Any = None) -> Optional[Table]:
    """Reads a table row under SELECT ... FOR UPDATE so check-then-act sequences serialize."""
    return await Table.filter(id=table_id).select_for_update().using_db(conn).first()


async def set_table_availability(table: Table, is_available: bool, conn: Any = None) -> bool:
    """
    Single write path for ``Table.is_available``.

    Returns True when the flag actually changed; an unchanged flag is not written.
    """
    if table.is_available == is_available:
        return False
    table.is_available = is_available
    await table.save(update_fields=["is_available", "updated_at"], using_db=conn)
    log.info(f"Table {table.table_number} marked {'available' if is_available else 'unavailable'}.")
    return True


async def create_table(table_number: int, capacity: int) -> Table:
    async with in_transaction() as conn:
        if await Table.filter(table_number=table_number).using_db(conn).exists():
            raise ConflictError("Table with this number already exists")
        table = await Table.create(table_number=table_number, capacity=capacity, using_db=conn)
    log.info(f"Table {table.table_number} created (capacity {table.capacity}).")
    return table


async def update_table(table_id, fields: Dict[str, Any]) -> Table:
    """Partial admin update; table_number stays unique across tables."""
    table_id = parse_id(table_id, "table")
    async with in_transaction() as conn:
        table = await lock_table(table_id, conn)
        if not table:
            raise NotFoundError("Table not found")

        table_number = fields.get("table_number")
        if table_number is not None and table_number != table.table_number:
            taken = await Table.filter(table_number=table_number).exclude(id=table_id).using_db(conn).exists()
            if taken:
                raise ConflictError("Table with this number already exists")
            table.table_number = table_number
        if fields.get("capacity") is not None:
            table.capacity = fields["capacity"]
        await table.save(using_db=conn)

        if fields.get("is_available") is not None:
            await set_table_availability(table, fields["is_available"], conn)
    return table


async def update_table_availability(table_id, is_available: bool) -> Table:
    table_id = parse_id(table_id, "table")
    async with in_transaction() as conn:
        table = await lock_table(table_id, conn)
        if not table:
            raise NotFoundError("Table not found")
        await set_table_availability(table, is_available, conn)
    return table

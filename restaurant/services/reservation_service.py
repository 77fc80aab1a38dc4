import logging
from datetime import date as date_type
from typing import Any, List, Optional, Union
from uuid import UUID

from tortoise.transactions import in_transaction

from restaurant.core.errors import ConflictError, InvalidArgumentError, NotFoundError
from restaurant.events.outbox_utility import RESERVATION_STATUS_CHANGED, create_outbox_event
from restaurant.models.reservation import ACTIVE_RESERVATION_STATUSES, Reservation, ReservationStatus
from restaurant.models.table import Table
from restaurant.services.identifiers import parse_id
from restaurant.services.table_service import lock_table, set_table_availability
from restaurant.services.transitions import RESERVATION_TRANSITIONS, coerce_status, ensure_transition

log = logging.getLogger("reservation_service")

RELEASING_STATUSES = (ReservationStatus.CANCELLED, ReservationStatus.COMPLETED)


def _parse_date(value: Union[date_type, str]) -> date_type:
    if isinstance(value, date_type):
        return value
    try:
        return date_type.fromisoformat(str(value))
    except ValueError:
        raise InvalidArgumentError(f"Invalid reservation date: {value!r}")


async def has_booking_conflict(table_id: UUID, date: date_type, time: str, conn: Any = None) -> bool:
    """True when an active reservation already holds the table at this date and time."""
    return await Reservation.filter(
        table_id=table_id,
        date=date,
        time=time,
        status__in=list(ACTIVE_RESERVATION_STATUSES),
    ).using_db(conn).exists()


async def find_available_table(number_of_guests: int, date: date_type, time: str, conn: Any = None) -> Table:
    """
    Auto-assignment: the smallest available table that seats the party and is
    free at the slot. Equal capacities are broken by table number.
    """
    candidates = await Table.filter(
        is_available=True, capacity__gte=number_of_guests
    ).order_by("capacity", "table_number").select_for_update().using_db(conn)
    if not candidates:
        raise ConflictError("No available tables found for the requested number of guests.")

    for table in candidates:
        if not await has_booking_conflict(table.id, date, time, conn):
            return table
    raise ConflictError("No suitable table found for reservation at this time.")


async def _reserve_explicit_table(table_id, number_of_guests: int, date: date_type, time: str, conn: Any) -> Table:
    table = await lock_table(parse_id(table_id, "table"), conn)
    if not table:
        raise NotFoundError("Specified table not found.")
    if not table.is_available:
        raise ConflictError(f"Table {table.table_number} is currently not available.")
    if table.capacity < number_of_guests:
        raise ConflictError(
            f"Table {table.table_number} cannot accommodate {number_of_guests} guests "
            f"(capacity: {table.capacity})."
        )
    if await has_booking_conflict(table.id, date, time, conn):
        raise ConflictError(f"Table {table.table_number} is already reserved for {time} on {date.isoformat()}.")
    return table


async def create_reservation(
    customer_name: Optional[str],
    phone_number: Optional[str],
    date: Union[date_type, str, None],
    time: Optional[str],
    number_of_guests: Optional[int],
    table_id: Union[UUID, str, None] = None,
    notes: Optional[str] = None,
) -> Reservation:
    if not (customer_name and phone_number and date and time and number_of_guests):
        raise InvalidArgumentError(
            "Please fill all required fields: customer_name, phone_number, date, time, number_of_guests."
        )
    if number_of_guests < 1:
        raise InvalidArgumentError("number_of_guests must be at least 1.")
    date = _parse_date(date)

    async with in_transaction() as conn:
        if table_id:
            table = await _reserve_explicit_table(table_id, number_of_guests, date, time, conn)
        else:
            table = await find_available_table(number_of_guests, date, time, conn)

        reservation = await Reservation.create(
            customer_name=customer_name,
            phone_number=phone_number,
            table=table,
            date=date,
            time=time,
            number_of_guests=number_of_guests,
            status=ReservationStatus.PENDING,
            notes=notes,
            using_db=conn
        )

    log.info(
        f"Reservation {reservation.id} for {customer_name} ({number_of_guests} guests) "
        f"on {date.isoformat()} {time} at table {table.table_number}."
    )
    return reservation


async def get_reservation_by_id(reservation_id: Union[UUID, str]) -> Optional[Reservation]:
    reservation_id = parse_id(reservation_id, "reservation")
    return await Reservation.get_or_none(id=reservation_id).prefetch_related("table")


async def list_reservations(
    date: Union[date_type, str, None] = None,
    status: Union[ReservationStatus, str, None] = None,
    table_id: Union[UUID, str, None] = None,
) -> List[Reservation]:
    query = Reservation.all()
    if date:
        query = query.filter(date=_parse_date(date))
    if status:
        query = query.filter(status=coerce_status(ReservationStatus, status))
    if table_id:
        query = query.filter(table_id=parse_id(table_id, "table"))
    return await query.order_by("date", "time").prefetch_related("table")


async def update_reservation_status(
    reservation_id: Union[UUID, str], new_status: Union[ReservationStatus, str]
) -> Reservation:
    """
    Moves a reservation along the status graph and keeps its table in step:
    confirming holds the table, cancelling or completing releases it.
    """
    reservation_id = parse_id(reservation_id, "reservation")
    new_status = coerce_status(ReservationStatus, new_status)

    async with in_transaction() as conn:
        reservation = await Reservation.filter(id=reservation_id).select_for_update().using_db(conn).first()
        if not reservation:
            raise NotFoundError("Reservation not found")

        old_status = reservation.status
        ensure_transition(RESERVATION_TRANSITIONS, old_status, new_status, "Reservation")
        if old_status == new_status:
            return reservation

        reservation.status = new_status
        if reservation.table_id:
            table = await lock_table(reservation.table_id, conn)
            if table:
                if new_status == ReservationStatus.CONFIRMED:
                    await set_table_availability(table, False, conn)
                elif new_status in RELEASING_STATUSES and old_status not in RELEASING_STATUSES:
                    await set_table_availability(table, True, conn)
        await reservation.save(using_db=conn)

        await create_outbox_event(
            aggregate_type="reservation",
            aggregate_id=reservation.id,
            event_type=RESERVATION_STATUS_CHANGED,
            payload={
                "reservation_id": str(reservation.id),
                "table_id": str(reservation.table_id) if reservation.table_id else None,
                "old_status": old_status.value,
                "new_status": new_status.value,
            },
            conn=conn
        )

    log.info(f"Reservation {reservation.id} moved from {old_status.value} to {new_status.value}.")
    return reservation


async def delete_reservation(reservation_id: Union[UUID, str]) -> None:
    """
    Removes the reservation. Only a confirmed one frees its table, since a
    pending reservation never took the table.
    """
    reservation_id = parse_id(reservation_id, "reservation")
    async with in_transaction() as conn:
        reservation = await Reservation.filter(id=reservation_id).select_for_update().using_db(conn).first()
        if not reservation:
            raise NotFoundError("Reservation not found")
        table_id = reservation.table_id
        was_confirmed = reservation.status == ReservationStatus.CONFIRMED
        await reservation.delete(using_db=conn)

        if table_id and was_confirmed:
            table = await lock_table(table_id, conn)
            if table:
                await set_table_availability(table, True, conn)
    log.info(f"Reservation {reservation_id} removed.")

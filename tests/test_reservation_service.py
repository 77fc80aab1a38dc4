from datetime import date
from uuid import uuid4

import pytest

from restaurant.core.errors import ConflictError, InvalidArgumentError, NotFoundError
from restaurant.events.outbox_utility import RESERVATION_STATUS_CHANGED
from restaurant.models import OutboxEvent, Reservation, ReservationStatus, Table
from restaurant.services.reservation_service import (
    create_reservation,
    delete_reservation,
    get_reservation_by_id,
    list_reservations,
    update_reservation_status,
)

EVENING = date(2026, 11, 20)


async def _book(guests, table_id=None, time="19:00", day=EVENING, name="Asha"):
    return await create_reservation(name, "555-0100", day, time, guests, table_id=table_id)


async def _table(table_id):
    return await Table.get(id=table_id)


class TestAutoAssignment:

    @pytest.mark.asyncio
    async def test_smallest_fitting_table_is_chosen(self, tables):
        reservation = await _book(3)
        assert reservation.table_id == tables[1].id

    @pytest.mark.asyncio
    async def test_booked_table_is_skipped(self, tables):
        await _book(3)
        second = await _book(3, name="Ben")
        assert second.table_id == tables[2].id

    @pytest.mark.asyncio
    async def test_other_time_slot_does_not_conflict(self, tables):
        await _book(3)
        later = await _book(3, time="21:00")
        assert later.table_id == tables[1].id

    @pytest.mark.asyncio
    async def test_equal_capacity_prefers_lower_table_number(self, db):
        await Table.create(table_number=5, capacity=4)
        lower = await Table.create(table_number=2, capacity=4)

        reservation = await _book(4)

        assert reservation.table_id == lower.id

    @pytest.mark.asyncio
    async def test_unavailable_tables_are_skipped(self, tables):
        tables[1].is_available = False
        await tables[1].save()

        reservation = await _book(3)

        assert reservation.table_id == tables[2].id

    @pytest.mark.asyncio
    async def test_party_too_large(self, tables):
        with pytest.raises(ConflictError, match="No available tables found"):
            await _book(12)

    @pytest.mark.asyncio
    async def test_every_fitting_table_booked(self, tables):
        await _book(5)
        with pytest.raises(ConflictError, match="No suitable table found"):
            await _book(5, name="Ben")


class TestExplicitTable:

    @pytest.mark.asyncio
    async def test_double_booking_is_rejected(self, tables):
        await _book(2, table_id=tables[0].id)
        with pytest.raises(ConflictError, match="already reserved"):
            await _book(2, table_id=str(tables[0].id), name="Ben")
        assert await Reservation.all().count() == 1

    @pytest.mark.asyncio
    async def test_cancelled_booking_frees_the_slot(self, tables):
        first = await _book(2, table_id=tables[0].id)
        await update_reservation_status(first.id, "cancelled")

        second = await _book(2, table_id=tables[0].id, name="Ben")

        assert second.table_id == tables[0].id

    @pytest.mark.asyncio
    async def test_capacity_shortfall(self, tables):
        with pytest.raises(ConflictError, match="cannot accommodate 3 guests"):
            await _book(3, table_id=tables[0].id)

    @pytest.mark.asyncio
    async def test_unavailable_table(self, tables):
        tables[0].is_available = False
        await tables[0].save()
        with pytest.raises(ConflictError, match="not available"):
            await _book(2, table_id=tables[0].id)

    @pytest.mark.asyncio
    async def test_unknown_table(self, tables):
        with pytest.raises(NotFoundError, match="Specified table not found"):
            await _book(2, table_id=uuid4())


class TestValidation:

    @pytest.mark.asyncio
    async def test_missing_required_fields(self, tables):
        with pytest.raises(InvalidArgumentError, match="Please fill all required fields"):
            await create_reservation("Asha", None, EVENING, "19:00", 2)

    @pytest.mark.asyncio
    async def test_date_string_is_parsed(self, tables):
        reservation = await create_reservation("Asha", "555-0100", "2026-11-20", "19:00", 2)
        assert reservation.date == EVENING

    @pytest.mark.asyncio
    async def test_bad_date_string(self, tables):
        with pytest.raises(InvalidArgumentError):
            await create_reservation("Asha", "555-0100", "20/11/2026", "19:00", 2)


class TestStatusAndTableAvailability:

    @pytest.mark.asyncio
    async def test_confirm_holds_table_and_cancel_releases_it(self, tables):
        reservation = await _book(2, table_id=tables[0].id)

        await update_reservation_status(reservation.id, "confirmed")
        assert (await _table(tables[0].id)).is_available is False

        await update_reservation_status(reservation.id, "cancelled")
        assert (await _table(tables[0].id)).is_available is True

    @pytest.mark.asyncio
    async def test_completion_releases_table(self, tables):
        reservation = await _book(2, table_id=tables[0].id)
        await update_reservation_status(reservation.id, "confirmed")

        await update_reservation_status(reservation.id, "completed")

        assert (await _table(tables[0].id)).is_available is True

    @pytest.mark.asyncio
    async def test_final_state_cannot_be_reconfirmed(self, tables):
        reservation = await _book(2)
        await update_reservation_status(reservation.id, "cancelled")

        with pytest.raises(InvalidArgumentError, match="final state"):
            await update_reservation_status(reservation.id, "confirmed")
        assert (await _table(tables[0].id)).is_available is True

    @pytest.mark.asyncio
    async def test_status_change_is_recorded(self, tables):
        reservation = await _book(2)

        await update_reservation_status(reservation.id, ReservationStatus.CONFIRMED)

        event = await OutboxEvent.get(event_type=RESERVATION_STATUS_CHANGED)
        assert event.payload["new_status"] == "confirmed"
        assert event.payload["table_id"] == str(tables[0].id)

    @pytest.mark.asyncio
    async def test_unknown_reservation(self, db):
        with pytest.raises(NotFoundError):
            await update_reservation_status(uuid4(), "confirmed")


class TestDelete:

    @pytest.mark.asyncio
    async def test_deleting_confirmed_reservation_frees_table(self, tables):
        reservation = await _book(2, table_id=tables[0].id)
        await update_reservation_status(reservation.id, "confirmed")

        await delete_reservation(reservation.id)

        assert await get_reservation_by_id(reservation.id) is None
        assert (await _table(tables[0].id)).is_available is True

    @pytest.mark.asyncio
    async def test_deleting_pending_reservation_leaves_table_alone(self, tables):
        reservation = await _book(2, table_id=tables[0].id)
        tables[0].is_available = False
        await tables[0].save()

        await delete_reservation(reservation.id)

        assert (await _table(tables[0].id)).is_available is False

    @pytest.mark.asyncio
    async def test_delete_unknown(self, db):
        with pytest.raises(NotFoundError):
            await delete_reservation(uuid4())


class TestListing:

    @pytest.mark.asyncio
    async def test_sorted_by_date_then_time(self, tables):
        late = await _book(2, time="21:00")
        early = await _book(2, time="18:00")
        tomorrow = await _book(2, day=date(2026, 11, 21), time="12:00")

        listed = await list_reservations()

        assert [r.id for r in listed] == [early.id, late.id, tomorrow.id]

    @pytest.mark.asyncio
    async def test_filters(self, tables):
        first = await _book(2, time="18:00")
        await _book(2, day=date(2026, 11, 21))
        await update_reservation_status(first.id, "confirmed")

        assert [r.id for r in await list_reservations(date="2026-11-20")] == [first.id]
        assert [r.id for r in await list_reservations(status="confirmed")] == [first.id]
        assert len(await list_reservations(table_id=tables[0].id)) == 2

import pytest

from restaurant.core.errors import InvalidArgumentError
from restaurant.models.order import OrderStatus
from restaurant.models.reservation import ReservationStatus
from restaurant.services.transitions import (
    ORDER_TRANSITIONS,
    RESERVATION_TRANSITIONS,
    can_transition,
    coerce_status,
    ensure_transition,
)


class TestOrderTransitions:

    @pytest.mark.parametrize("target", [OrderStatus.PREPARING, OrderStatus.COMPLETED, OrderStatus.CANCELLED])
    def test_pending_moves_forward(self, target):
        assert can_transition(ORDER_TRANSITIONS, OrderStatus.PENDING, target)

    def test_preparing_cannot_go_back_to_pending(self):
        with pytest.raises(InvalidArgumentError, match="Cannot move order from preparing to pending"):
            ensure_transition(ORDER_TRANSITIONS, OrderStatus.PREPARING, OrderStatus.PENDING, "Order")

    @pytest.mark.parametrize("final", [OrderStatus.COMPLETED, OrderStatus.CANCELLED])
    def test_final_states_are_closed(self, final):
        with pytest.raises(InvalidArgumentError, match="already in a final state"):
            ensure_transition(ORDER_TRANSITIONS, final, OrderStatus.PENDING, "Order")

    def test_same_status_is_accepted(self):
        ensure_transition(ORDER_TRANSITIONS, OrderStatus.COMPLETED, OrderStatus.COMPLETED, "Order")


class TestReservationTransitions:

    def test_pending_can_be_confirmed(self):
        assert can_transition(RESERVATION_TRANSITIONS, ReservationStatus.PENDING, ReservationStatus.CONFIRMED)

    def test_confirmed_cannot_return_to_pending(self):
        assert not can_transition(RESERVATION_TRANSITIONS, ReservationStatus.CONFIRMED, ReservationStatus.PENDING)

    def test_cancelled_cannot_be_confirmed(self):
        with pytest.raises(InvalidArgumentError):
            ensure_transition(
                RESERVATION_TRANSITIONS, ReservationStatus.CANCELLED, ReservationStatus.CONFIRMED, "Reservation"
            )


def test_coerce_status_accepts_wire_value():
    assert coerce_status(OrderStatus, "preparing") is OrderStatus.PREPARING


def test_coerce_status_rejects_unknown_value():
    with pytest.raises(InvalidArgumentError, match="Unknown status 'shipped'"):
        coerce_status(OrderStatus, "shipped")

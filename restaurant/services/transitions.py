"""
Allowed status moves for orders and reservations.

Re-asserting the current status is accepted as a no-op; every other move not
listed here is rejected with ``InvalidArgumentError``.
"""
from enum import Enum
from typing import Dict, FrozenSet, Type, TypeVar, Union

from restaurant.core.errors import InvalidArgumentError
from restaurant.models.order import OrderStatus
from restaurant.models.reservation import ReservationStatus

S = TypeVar("S", bound=Enum)

ORDER_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PREPARING, OrderStatus.COMPLETED, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

RESERVATION_TRANSITIONS: Dict[ReservationStatus, FrozenSet[ReservationStatus]] = {
    ReservationStatus.PENDING: frozenset(
        {ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED, ReservationStatus.COMPLETED}
    ),
    ReservationStatus.CONFIRMED: frozenset({ReservationStatus.COMPLETED, ReservationStatus.CANCELLED}),
    ReservationStatus.CANCELLED: frozenset(),
    ReservationStatus.COMPLETED: frozenset(),
}


def coerce_status(status_enum: Type[S], value: Union[S, str, None]) -> S:
    """Turns a raw status string into the enum member, rejecting unknown values."""
    if isinstance(value, status_enum):
        return value
    try:
        return status_enum(value)
    except ValueError:
        allowed = ", ".join(member.value for member in status_enum)
        raise InvalidArgumentError(f"Unknown status '{value}'. Expected one of: {allowed}.")


def can_transition(transitions: Dict[S, FrozenSet[S]], current: S, target: S) -> bool:
    return current == target or target in transitions.get(current, frozenset())


def ensure_transition(transitions: Dict[S, FrozenSet[S]], current: S, target: S, entity: str) -> None:
    if can_transition(transitions, current, target):
        return
    if not transitions.get(current):
        raise InvalidArgumentError(
            f"{entity} is already in a final state: {current.value}. Status cannot be updated."
        )
    raise InvalidArgumentError(f"Cannot move {entity.lower()} from {current.value} to {target.value}.")

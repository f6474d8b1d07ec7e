from enum import Enum
from typing import Dict, FrozenSet

from cloud_kitchen.core.errors import InvalidTransitionError


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    UNPAID = "unpaid"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


# Kitchen flow; any non-terminal order can still be cancelled.
TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset({OrderStatus.OUT_FOR_DELIVERY, OrderStatus.CANCELLED}),
    OrderStatus.OUT_FOR_DELIVERY: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

# Statuses the dashboard counts as "still waiting on the kitchen"
OPEN_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.CONFIRMED})

# Minutes shown to the customer while polling the tracking endpoint
ESTIMATED_MINUTES: Dict[OrderStatus, int] = {
    OrderStatus.PENDING: 25,
    OrderStatus.CONFIRMED: 20,
    OrderStatus.PREPARING: 15,
    OrderStatus.READY: 5,
    OrderStatus.OUT_FOR_DELIVERY: 10,
    OrderStatus.DELIVERED: 0,
    OrderStatus.CANCELLED: 0,
}


def is_terminal(status: OrderStatus) -> bool:
    return not TRANSITIONS[status]


def can_transition(current: OrderStatus, requested: OrderStatus) -> bool:
    return requested in TRANSITIONS[current]


def assert_transition(current: str, requested: str) -> OrderStatus:
    """Validate a status change and return the target status.

    Raises InvalidTransitionError when the lifecycle does not allow the move,
    including writing the status an order already has.
    """
    current_status = OrderStatus(current)
    requested_status = OrderStatus(requested)
    if not can_transition(current_status, requested_status):
        raise InvalidTransitionError(current_status.value, requested_status.value)
    return requested_status

"""
ORDER LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed lifecycle transitions
for Order entities, and which side may trigger each one.

DESIGN PRINCIPLES:
- No database writes
- No side effects
- Single source of truth
"""

from orders.models import Order
from orders.services.exceptions import (
    InvalidOrderTransitionError,
    OrderPermissionError,
)

# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    Order.STATUS_REJECTED,
    Order.STATUS_CANCELLED,
    Order.STATUS_COMPLETED,
}

ALLOWED_TRANSITIONS = {
    Order.STATUS_PENDING: {
        Order.STATUS_ACCEPTED,
        Order.STATUS_REJECTED,
        Order.STATUS_CANCELLED,
    },
    Order.STATUS_ACCEPTED: {
        Order.STATUS_COMPLETED,
        Order.STATUS_CANCELLED,
    },
}

SIDE_VENDOR = "vendor"
SIDE_BUYER = "buyer"

# Which side may move an order INTO each status.
STATUS_ACTORS = {
    Order.STATUS_ACCEPTED: {SIDE_VENDOR},
    Order.STATUS_REJECTED: {SIDE_VENDOR},
    Order.STATUS_COMPLETED: {SIDE_VENDOR},
    Order.STATUS_CANCELLED: {SIDE_BUYER},
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def sides_of(*, order: Order, user) -> set:
    sides = set()
    if order.buyer_id and str(order.buyer_id) == str(user.pk):
        sides.add(SIDE_BUYER)
    if order.vendor.user_id and str(order.vendor.user_id) == str(user.pk):
        sides.add(SIDE_VENDOR)
    return sides


def validate_transition(*, order: Order, target_status: str, user):
    if not sides_of(order=order, user=user) & STATUS_ACTORS.get(target_status, set()):
        raise OrderPermissionError(
            f"You are not allowed to set order status to '{target_status}'"
        )

    if not can_transition(
        from_status=order.status,
        to_status=target_status,
    ):
        raise InvalidOrderTransitionError(
            f"Order {order.id} cannot transition from "
            f"'{order.status}' to '{target_status}'"
        )

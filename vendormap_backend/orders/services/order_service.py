# orders/services/order_service.py

from __future__ import annotations

import logging

from django.db import transaction

from orders.models import Order
from orders.services.exceptions import SelfOrderError
from orders.services.order_lifecycle import validate_transition

logger = logging.getLogger(__name__)


@transaction.atomic
def place_order(*, buyer, vendor, items: str, note: str = "") -> Order:
    if vendor.user_id and str(vendor.user_id) == str(buyer.pk):
        raise SelfOrderError("You cannot order from your own vendor")

    order = Order.objects.create(
        vendor=vendor,
        buyer=buyer,
        buyer_name=buyer.display_name,
        items=items.strip(),
        note=(note or "").strip(),
    )

    logger.info(
        "Order placed",
        extra={"order_id": str(order.id), "vendor_id": str(vendor.id)},
    )
    return order


@transaction.atomic
def change_status(*, order_id, user, target_status: str) -> Order:
    """
    Move an order to `target_status` on behalf of `user`.

    Raises Order.DoesNotExist, OrderPermissionError or
    InvalidOrderTransitionError; the row is locked for the check + write.
    """
    order = Order.objects.select_for_update().select_related("vendor").get(pk=order_id)

    validate_transition(order=order, target_status=target_status, user=user)

    previous = order.status
    order.status = target_status
    order.save(update_fields=["status", "updated_at"])

    logger.info(
        "Order status changed",
        extra={"order_id": str(order.id), "from": previous, "to": target_status},
    )
    return order

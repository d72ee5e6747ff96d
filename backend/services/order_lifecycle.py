# backend/services/order_lifecycle.py
import enum
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from models.order import Order


class OrderStatus(str, enum.Enum):
    CREATED = "created"
    PAID = "paid"
    DELIVERED = "delivered"


class OrderTransitionError(Exception):
    """Raised when a payment or delivery event is not allowed in the order's current state."""


def _now() -> datetime:
    return datetime.now(timezone.utc)


def order_status(order: Order) -> OrderStatus:
    if order.is_delivered:
        return OrderStatus.DELIVERED
    if order.is_paid:
        return OrderStatus.PAID
    return OrderStatus.CREATED


def pay_order(order: Order, payment_result: Optional[Dict[str, Any]] = None, now: Optional[datetime] = None) -> Order:
    # Gateway confirmation is trusted as given; no capture verification here
    if order.is_paid:
        raise OrderTransitionError("Order is already paid")
    order.is_paid = True
    order.paid_at = now or _now()
    if payment_result:
        order.payment_result = dict(payment_result)
    return order


def deliver_order(order: Order, now: Optional[datetime] = None) -> Order:
    if not order.is_paid:
        raise OrderTransitionError("Order must be paid before it can be delivered")
    if order.is_delivered:
        raise OrderTransitionError("Order is already delivered")
    order.is_delivered = True
    order.delivered_at = now or _now()
    return order

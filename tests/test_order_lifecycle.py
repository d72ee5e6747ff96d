from datetime import datetime, timedelta, timezone

import pytest

from models.order import Order
from services.order_lifecycle import (
    OrderStatus, OrderTransitionError, deliver_order, order_status, pay_order,
)


def new_order():
    return Order(is_paid=False, is_delivered=False, paid_at=None, delivered_at=None)


def test_pay_then_deliver_sets_flags_and_ordered_timestamps():
    order = new_order()
    assert order_status(order) == OrderStatus.CREATED

    t0 = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    pay_order(order, {"id": "PAY-1", "status": "COMPLETED"}, now=t0)
    assert order_status(order) == OrderStatus.PAID

    deliver_order(order, now=t0 + timedelta(hours=5))

    assert order.is_paid is True
    assert order.is_delivered is True
    assert order.paid_at is not None and order.delivered_at is not None
    assert order.paid_at < order.delivered_at
    assert order.payment_result == {"id": "PAY-1", "status": "COMPLETED"}
    assert order_status(order) == OrderStatus.DELIVERED


def test_default_timestamps_are_now():
    order = new_order()
    pay_order(order)
    deliver_order(order)

    assert order.paid_at <= order.delivered_at
    assert order.delivered_at <= datetime.now(timezone.utc)
    assert order.payment_result is None


def test_deliver_before_pay_is_rejected():
    order = new_order()

    with pytest.raises(OrderTransitionError):
        deliver_order(order)

    assert order.is_delivered is False
    assert order.delivered_at is None


def test_repeated_transitions_are_rejected():
    order = new_order()
    pay_order(order)
    first_paid_at = order.paid_at

    with pytest.raises(OrderTransitionError):
        pay_order(order)
    assert order.paid_at == first_paid_at

    deliver_order(order)
    with pytest.raises(OrderTransitionError):
        deliver_order(order)

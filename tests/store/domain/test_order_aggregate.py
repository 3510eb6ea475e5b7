"""Tests for the Order aggregate and its status axes."""

import json

import pytest
from protean.exceptions import ValidationError

from store.errors import InvalidOrderState
from store.order.events import (
    OrderCancelled,
    OrderPlaced,
    OrderStatusChanged,
    PaymentStatusChanged,
    ShippingStatusChanged,
)
from store.order.order import Order, OrderStatus, PaymentStatus, ShippingStatus


def _make_order(**overrides):
    defaults = {
        "user_id": "user-001",
        "total_price": 50.0,
        "payment_method": "credit_card",
        "shipping_method": "standard",
        "shipping_address": "1 Main St, Springfield",
    }
    defaults.update(overrides)
    order = Order.open(**defaults)
    order.add_line("prod-001", 2, 10.0)
    order.add_line("prod-002", 1, 30.0)
    return order


class TestOpen:
    def test_all_axes_start_pending(self):
        order = _make_order()
        assert order.order_status == OrderStatus.PENDING.value
        assert order.payment_status == PaymentStatus.PENDING.value
        assert order.shipping_status == ShippingStatus.PENDING.value

    def test_total_is_stored(self):
        assert _make_order(total_price=49.999).total_price == 50.0

    def test_lines_are_copied(self):
        order = _make_order()
        assert len(order.items) == 2
        assert order.lines()[0] == {"product_id": "prod-001", "quantity": 2, "price": 10.0}
        assert order.items[0].subtotal == 20.0

    def test_mark_placed_raises_event(self):
        order = _make_order()
        order.mark_placed("cart-001")
        placed = [e for e in order._events if isinstance(e, OrderPlaced)]
        assert len(placed) == 1
        assert placed[0].cart_id == "cart-001"
        assert len(json.loads(placed[0].items)) == 2


class TestCancel:
    def test_cancel_pending_order(self):
        order = _make_order()
        order.cancel()
        assert order.order_status == OrderStatus.CANCELLED.value

    def test_cancel_raises_event_with_released_lines(self):
        order = _make_order()
        order.cancel()
        cancelled = [e for e in order._events if isinstance(e, OrderCancelled)]
        assert len(cancelled) == 1
        assert json.loads(cancelled[0].items) == [
            {"product_id": "prod-001", "quantity": 2},
            {"product_id": "prod-002", "quantity": 1},
        ]

    def test_cannot_cancel_twice(self):
        order = _make_order()
        order.cancel()
        with pytest.raises(InvalidOrderState):
            order.cancel()

    @pytest.mark.parametrize("status", ["processing", "shipped", "delivered", "completed"])
    def test_cannot_cancel_after_pending(self, status):
        order = _make_order()
        order.change_status(status)
        assert not order.is_cancellable()
        with pytest.raises(InvalidOrderState) as exc:
            order.cancel()
        assert exc.value.current == status

    def test_cannot_add_lines_after_cancel(self):
        order = _make_order()
        order.cancel()
        with pytest.raises(InvalidOrderState):
            order.add_line("prod-003", 1, 5.0)


class TestChangeStatus:
    def test_change_status(self):
        order = _make_order()
        order.change_status("processing")
        assert order.order_status == "processing"
        changed = [e for e in order._events if isinstance(e, OrderStatusChanged)]
        assert changed[0].previous_status == "pending"
        assert changed[0].new_status == "processing"

    def test_cancelled_is_not_an_admin_status(self):
        order = _make_order()
        with pytest.raises(InvalidOrderState):
            order.change_status("cancelled")
        assert order.order_status == "pending"

    def test_cancelled_order_is_frozen(self):
        order = _make_order()
        order.cancel()
        with pytest.raises(InvalidOrderState):
            order.change_status("processing")

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            _make_order().change_status("teleported")


class TestShipping:
    def test_update_shipping_with_tracking(self):
        order = _make_order()
        order.update_shipping("shipped", tracking_number="TRACK-123")
        assert order.shipping_status == "shipped"
        assert order.tracking_number == "TRACK-123"
        changed = [e for e in order._events if isinstance(e, ShippingStatusChanged)]
        assert changed[0].tracking_number == "TRACK-123"

    def test_update_shipping_keeps_tracking_when_omitted(self):
        order = _make_order()
        order.update_shipping("shipped", tracking_number="TRACK-123")
        order.update_shipping("delivered")
        assert order.tracking_number == "TRACK-123"

    def test_cancelled_order_cannot_ship(self):
        order = _make_order()
        order.cancel()
        with pytest.raises(InvalidOrderState):
            order.update_shipping("preparing")

    def test_unknown_shipping_status_rejected(self):
        with pytest.raises(ValidationError):
            _make_order().update_shipping("lost")


class TestPaymentOutcome:
    def test_record_payment_outcome(self):
        order = _make_order()
        order.record_payment_outcome("txn-001", "paid")
        assert order.payment_status == "paid"
        changed = [e for e in order._events if isinstance(e, PaymentStatusChanged)]
        assert changed[0].transaction_id == "txn-001"
        assert changed[0].previous_status == "pending"

    def test_unknown_payment_status_rejected(self):
        with pytest.raises(ValidationError):
            _make_order().record_payment_outcome("txn-001", "refunded")

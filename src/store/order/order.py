"""Order aggregate: an immutable snapshot of purchased lines with three status axes.

Status axes:
    order_status:    pending → processing → shipped → delivered → completed,
                     pending → cancelled (only through CancelOrder, which
                     returns the stock)
    payment_status:  pending / paid / failed / cancelled, driven by
                     Transaction outcomes
    shipping_status: pending / preparing / shipped / delivered / returned

Line items and the total are fixed when the order is placed; later catalog
price changes never reach an existing order.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from store.domain import store
from store.errors import InvalidOrderState
from store.order.events import (
    OrderCancelled,
    OrderPlaced,
    OrderStatusChanged,
    PaymentStatusChanged,
    ShippingStatusChanged,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    CANCELLED = "cancelled"


class ShippingStatus(Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    RETURNED = "returned"


def _parse(enum_cls, value, field_name):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = [member.value for member in enum_cls]
        raise ValidationError({field_name: [f"Unknown {field_name} '{value}'. Use one of: {allowed}"]}) from None


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@store.entity(part_of="Order")
class OrderItem:
    """A purchased line: product, quantity and the price paid per unit."""

    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)

    @property
    def subtotal(self):
        return round(self.price * self.quantity, 2)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@store.aggregate
class Order:
    user_id = Identifier(required=True)
    items = HasMany(OrderItem)
    total_price = Float(required=True, min_value=0.0)
    order_status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    shipping_status = String(choices=ShippingStatus, default=ShippingStatus.PENDING.value)
    payment_method = String(required=True, max_length=50)
    shipping_method = String(required=True, max_length=50)
    shipping_address = Text(required=True)
    tracking_number = String(max_length=255)
    notes = Text()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Placement
    # -------------------------------------------------------------------
    @classmethod
    def open(cls, user_id, total_price, payment_method, shipping_method, shipping_address, notes=None):
        """Create the order header. Lines are added with ``add_line``."""
        now = datetime.now(UTC)
        return cls(
            user_id=user_id,
            total_price=round(total_price, 2),
            order_status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            shipping_status=ShippingStatus.PENDING.value,
            payment_method=payment_method,
            shipping_method=shipping_method,
            shipping_address=shipping_address,
            notes=notes,
            created_at=now,
            updated_at=now,
        )

    def add_line(self, product_id, quantity, price):
        if OrderStatus(self.order_status) != OrderStatus.PENDING:
            raise InvalidOrderState(self.id, self.order_status, "Lines can only be added to a pending order")

        item = OrderItem(product_id=product_id, quantity=quantity, price=price)
        self.add_items(item)
        return item

    def mark_placed(self, cart_id):
        self.raise_(
            OrderPlaced(
                order_id=str(self.id),
                user_id=str(self.user_id),
                cart_id=str(cart_id),
                items=json.dumps(self.lines()),
                total_price=self.total_price,
                payment_method=self.payment_method,
                shipping_method=self.shipping_method,
                placed_at=self.created_at,
            )
        )

    def lines(self):
        return [
            {"product_id": str(item.product_id), "quantity": item.quantity, "price": item.price} for item in self.items
        ]

    # -------------------------------------------------------------------
    # Cancellation
    # -------------------------------------------------------------------
    def is_cancellable(self):
        return OrderStatus(self.order_status) == OrderStatus.PENDING

    def cancel(self):
        """Flip to cancelled. The caller returns the stock in the same commit."""
        if not self.is_cancellable():
            raise InvalidOrderState(self.id, self.order_status, f"Cannot cancel an order in {self.order_status} state")

        now = datetime.now(UTC)
        self.order_status = OrderStatus.CANCELLED.value
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                user_id=str(self.user_id),
                items=json.dumps([{"product_id": line["product_id"], "quantity": line["quantity"]} for line in self.lines()]),
                cancelled_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Payment axis
    # -------------------------------------------------------------------
    def record_payment_outcome(self, transaction_id, payment_status):
        status = _parse(PaymentStatus, payment_status, "payment_status")
        previous_status = self.payment_status

        self.payment_status = status.value
        self.updated_at = datetime.now(UTC)

        self.raise_(
            PaymentStatusChanged(
                order_id=str(self.id),
                transaction_id=str(transaction_id),
                previous_status=previous_status,
                new_status=status.value,
            )
        )

    # -------------------------------------------------------------------
    # Administrative updates
    # -------------------------------------------------------------------
    def change_status(self, new_status):
        status = _parse(OrderStatus, new_status, "order_status")
        current = OrderStatus(self.order_status)

        if current == OrderStatus.CANCELLED:
            raise InvalidOrderState(self.id, self.order_status, "A cancelled order cannot change status")
        if status == OrderStatus.CANCELLED:
            raise InvalidOrderState(
                self.id, self.order_status, "Orders are cancelled through cancellation so their stock is returned"
            )

        previous_status = self.order_status
        self.order_status = status.value
        self.updated_at = datetime.now(UTC)

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous_status,
                new_status=status.value,
            )
        )

    def update_shipping(self, shipping_status, tracking_number=None):
        status = _parse(ShippingStatus, shipping_status, "shipping_status")
        if OrderStatus(self.order_status) == OrderStatus.CANCELLED:
            raise InvalidOrderState(self.id, self.order_status, "A cancelled order cannot be shipped")

        previous_status = self.shipping_status
        self.shipping_status = status.value
        if tracking_number:
            self.tracking_number = tracking_number
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ShippingStatusChanged(
                order_id=str(self.id),
                previous_status=previous_status,
                new_status=status.value,
                tracking_number=tracking_number,
            )
        )

"""Domain events for the Order aggregate.

Events are immutable facts recorded in the event store when the Unit of Work
that raised them commits.
"""

from protean.fields import DateTime, Float, Identifier, String, Text

from store.domain import store


@store.event(part_of="Order")
class OrderPlaced:
    """A cart was converted into an order and its stock was reserved."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    cart_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity, price}
    total_price = Float(required=True)
    payment_method = String(required=True)
    shipping_method = String(required=True)
    placed_at = DateTime(required=True)


@store.event(part_of="Order")
class OrderCancelled:
    """A pending order was cancelled and its stock returned."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of released {product_id, quantity}
    cancelled_at = DateTime(required=True)


@store.event(part_of="Order")
class OrderStatusChanged:
    """An administrator moved the order along its lifecycle."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)


@store.event(part_of="Order")
class PaymentStatusChanged:
    """A transaction outcome changed the order's payment status."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    transaction_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)


@store.event(part_of="Order")
class ShippingStatusChanged:
    """The shipping axis of the order was updated."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    tracking_number = String()

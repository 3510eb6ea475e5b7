"""Order placement: converts the user's cart into an order.

Runs as one Unit of Work: the order header, its lines, every stock
reservation and the emptied cart are committed together, or not at all.

Steps:
    1. Load the cart; an empty cart is rejected.
    2. Total the cart from its price snapshots.
    3. Open the order header (all statuses pending).
    4. Copy each cart line into the order and reserve its stock, in cart order.
    5. Empty the cart (the cart row itself stays).
    6. Commit and hand back the order id.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from store.cart.cart import ShoppingCart
from store.domain import store
from store.errors import EmptyCart, InsufficientStock
from store.inventory.product import Product
from store.order.order import Order

logger = structlog.get_logger(__name__)


@store.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    payment_method = String(required=True, max_length=50)
    shipping_method = String(required=True, max_length=50)
    shipping_address = Text(required=True)
    notes = Text()


@store.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        carts = current_domain.repository_for(ShoppingCart)
        ledger = current_domain.repository_for(Product)
        orders = current_domain.repository_for(Order)

        cart = carts.for_user(command.user_id)
        if cart.is_empty():
            raise EmptyCart(cart.id)

        lines = list(cart.items)

        order = Order.open(
            user_id=command.user_id,
            total_price=cart.total,
            payment_method=command.payment_method,
            shipping_method=command.shipping_method,
            shipping_address=command.shipping_address,
            notes=command.notes,
        )

        # Reject shortfalls before the first write
        for line in lines:
            available = ledger.available(line.product_id)
            if available < line.quantity:
                raise InsufficientStock(line.product_id, line.quantity, available)

        for line in lines:
            order.add_line(line.product_id, line.quantity, line.price)
            ledger.reserve(line.product_id, line.quantity)

        cart.clear()
        order.mark_placed(cart.id)

        orders.add(order)
        carts.add(cart)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            user_id=str(command.user_id),
            lines=len(lines),
            total_price=order.total_price,
        )
        return str(order.id)

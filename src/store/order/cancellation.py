"""Order cancellation: command and handler.

Only a pending order can be cancelled. Every line's quantity goes back to
stock in the same Unit of Work that flips the status.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from store.domain import store
from store.inventory.product import Product
from store.order.order import Order

logger = structlog.get_logger(__name__)


@store.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    user_id = Identifier()  # When present, the order must belong to this user


@store.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        orders = current_domain.repository_for(Order)
        ledger = current_domain.repository_for(Product)

        if command.user_id:
            order = orders.find_for_user(command.order_id, command.user_id)
        else:
            order = orders.find(command.order_id)

        order.cancel()
        for item in order.items:
            ledger.release(item.product_id, item.quantity)

        orders.add(order)

        logger.info(
            "Order cancelled",
            order_id=str(order.id),
            user_id=str(order.user_id),
            lines_released=len(order.items),
        )

"""Administrative order updates: lifecycle and shipping status."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from store.domain import store
from store.order.order import Order


@store.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=50)


@store.command(part_of="Order")
class UpdateShippingStatus:
    order_id = Identifier(required=True)
    shipping_status = String(required=True, max_length=50)
    tracking_number = String(max_length=255)


@store.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        orders = current_domain.repository_for(Order)
        order = orders.find(command.order_id)
        order.change_status(command.status)
        orders.add(order)

    @handle(UpdateShippingStatus)
    def update_shipping_status(self, command):
        orders = current_domain.repository_for(Order)
        order = orders.find(command.order_id)
        order.update_shipping(command.shipping_status, tracking_number=command.tracking_number)
        orders.add(order)

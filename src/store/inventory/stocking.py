"""Catalog collaborator: product registration and administrative stock edits."""

from protean import handle
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from store.domain import store
from store.inventory.product import Product


@store.command(part_of="Product")
class RegisterProduct:
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    stock = Integer(default=0, min_value=0)


@store.command(part_of="Product")
class SetStock:
    product_id = Identifier(required=True)
    stock = Integer(required=True, min_value=0)


@store.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(RegisterProduct)
    def register_product(self, command):
        product = Product.register(
            name=command.name,
            price=command.price,
            stock=command.stock or 0,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(SetStock)
    def set_stock(self, command):
        ledger = current_domain.repository_for(Product)
        product = ledger.find(command.product_id)
        product.set_stock(command.stock)
        ledger.add(product)

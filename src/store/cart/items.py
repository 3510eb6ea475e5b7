"""Cart item management: commands and handler.

Every command is addressed by ``user_id``; the cart is looked up (or
created) from it.
"""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from store.cart.cart import ShoppingCart
from store.domain import store
from store.inventory.product import Product


@store.command(part_of="ShoppingCart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@store.command(part_of="ShoppingCart")
class UpdateCartItem:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@store.command(part_of="ShoppingCart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)


@store.command(part_of="ShoppingCart")
class ClearCart:
    user_id = Identifier(required=True)


@store.command_handler(part_of=ShoppingCart)
class ManageCartHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = current_domain.repository_for(Product).find(command.product_id)

        carts = current_domain.repository_for(ShoppingCart)
        cart = carts.for_user(command.user_id)
        item = cart.add_item(product, command.quantity)
        carts.add(cart)
        return str(item.id)

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        carts = current_domain.repository_for(ShoppingCart)
        cart = carts.for_user(command.user_id)
        item = cart.item(command.item_id)

        product = current_domain.repository_for(Product).find(item.product_id)
        cart.update_item(command.item_id, command.quantity, product)
        carts.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        carts = current_domain.repository_for(ShoppingCart)
        cart = carts.for_user(command.user_id)
        cart.remove_item(command.item_id)
        carts.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        carts = current_domain.repository_for(ShoppingCart)
        cart = carts.for_user(command.user_id)
        cart.clear()
        carts.add(cart)

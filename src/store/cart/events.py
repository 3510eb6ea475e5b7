"""Domain events for the ShoppingCart aggregate."""

from protean.fields import Float, Identifier, Integer

from store.domain import store


@store.event(part_of="ShoppingCart")
class CartItemAdded:
    """A product was added to the cart, or merged into its existing line."""

    __version__ = "v1"

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    line_quantity = Integer(required=True)
    price = Float(required=True)


@store.event(part_of="ShoppingCart")
class CartItemUpdated:
    """The quantity of a cart line was changed."""

    __version__ = "v1"

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@store.event(part_of="ShoppingCart")
class CartItemRemoved:
    """A line was removed from the cart."""

    __version__ = "v1"

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)


@store.event(part_of="ShoppingCart")
class CartCleared:
    """All lines were removed, either by the user or by placing an order."""

    __version__ = "v1"

    cart_id = Identifier(required=True)
    items_removed = Integer(required=True)

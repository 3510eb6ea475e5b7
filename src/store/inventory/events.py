"""Domain events for the Product aggregate."""

from protean.fields import Float, Identifier, Integer, String

from store.domain import store


@store.event(part_of="Product")
class ProductRegistered:
    """A product was added to the catalog with its opening stock."""

    __version__ = "v1"

    product_id = Identifier(required=True)
    name = String(required=True)
    price = Float(required=True)
    stock = Integer(required=True)


@store.event(part_of="Product")
class StockSet:
    """An administrator overwrote a product's stock count."""

    __version__ = "v1"

    product_id = Identifier(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)

"""Product aggregate: the slice of the catalog the store core depends on.

The catalog owns name, price and stock. Orders read the current price for
cart snapshots and move stock through the InventoryLedger; nothing in the
core edits anything else on a product.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Integer, String

from store.domain import store
from store.inventory.events import ProductRegistered, StockSet


@store.aggregate
class Product:
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    stock = Integer(default=0, min_value=0)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def stock_cannot_be_negative(self):
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

    @classmethod
    def register(cls, name, price, stock=0):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            price=round(price, 2),
            stock=stock,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductRegistered(
                product_id=str(product.id),
                name=name,
                price=product.price,
                stock=stock,
            )
        )
        return product

    def set_stock(self, stock):
        """Overwrite the stock count (administrative edit)."""
        if stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

        previous_stock = self.stock
        self.stock = stock
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockSet(
                product_id=str(self.id),
                previous_stock=previous_stock,
                new_stock=stock,
            )
        )

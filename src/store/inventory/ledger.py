"""Inventory Ledger: stock reservations and releases for products.

Stock moves only through a conditional write: the product row is updated
with a filter on the stock value that was just read. On SQL providers that is
a single ``UPDATE ... WHERE id = :id AND stock = :seen`` which takes the row
lock, so two orders competing for the same units serialize in the database
and the loser re-reads the stock it lost to. The write runs in the caller's
Unit of Work and commits or rolls back with it.
"""

from datetime import UTC, datetime

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError

from store.domain import store
from store.errors import EntityKind, InsufficientStock, NotFound, StockConflict
from store.inventory.product import Product

logger = structlog.get_logger(__name__)

MAX_STOCK_WRITE_ATTEMPTS = 5


def _check_quantity(quantity):
    if quantity is None or quantity < 1:
        raise ValidationError({"quantity": ["Quantity must be at least 1"]})


@store.repository(part_of=Product)
class InventoryLedger:
    """Repository for Product that owns every stock mutation made by orders."""

    def find(self, product_id) -> Product:
        try:
            return self.get(str(product_id))
        except ObjectNotFoundError:
            raise NotFound(EntityKind.PRODUCT, product_id) from None

    def available(self, product_id) -> int:
        # Straight from storage, never a copy held by the Unit of Work
        try:
            return self._dao.get(str(product_id)).stock
        except ObjectNotFoundError:
            raise NotFound(EntityKind.PRODUCT, product_id) from None

    def reserve(self, product_id, quantity) -> int:
        """Take ``quantity`` units out of stock. Returns the stock left."""
        _check_quantity(quantity)

        for _ in range(MAX_STOCK_WRITE_ATTEMPTS):
            seen = self.available(product_id)
            if seen < quantity:
                raise InsufficientStock(product_id, quantity, seen)
            if self._write_stock(product_id, seen, seen - quantity):
                logger.debug(
                    "Reserved stock",
                    product_id=str(product_id),
                    quantity=quantity,
                    remaining=seen - quantity,
                )
                return seen - quantity
            logger.info("Stock changed during reservation, re-reading", product_id=str(product_id))

        raise StockConflict(product_id, MAX_STOCK_WRITE_ATTEMPTS)

    def release(self, product_id, quantity) -> int:
        """Put ``quantity`` previously reserved units back. Returns the new stock."""
        _check_quantity(quantity)

        for _ in range(MAX_STOCK_WRITE_ATTEMPTS):
            seen = self.available(product_id)
            if self._write_stock(product_id, seen, seen + quantity):
                logger.debug(
                    "Released stock",
                    product_id=str(product_id),
                    quantity=quantity,
                    remaining=seen + quantity,
                )
                return seen + quantity
            logger.info("Stock changed during release, re-reading", product_id=str(product_id))

        raise StockConflict(product_id, MAX_STOCK_WRITE_ATTEMPTS)

    def _write_stock(self, product_id, seen, new_stock) -> bool:
        updated = self._dao.query.filter(id=str(product_id), stock=seen).update_all(
            stock=new_stock,
            updated_at=datetime.now(UTC),
        )
        return updated == 1

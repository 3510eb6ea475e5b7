"""Shopping Cart aggregate: one per user, the staging area for an order.

Each line keeps the price the product had when it was added. The snapshot is
refreshed when the same product is added again, but not when only the
quantity changes, and the order total is computed from these snapshots.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer

from store.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartItemUpdated
from store.domain import store
from store.errors import EntityKind, InsufficientStock, NotFound


@store.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)
    added_at = DateTime()

    @property
    def subtotal(self):
        return round(self.price * self.quantity, 2)


@store.aggregate
class ShoppingCart:
    user_id = Identifier(required=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        return cls(
            user_id=user_id,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def total(self):
        return round(sum(item.price * item.quantity for item in self.items), 2)

    def is_empty(self):
        return not self.items

    def item(self, item_id):
        found = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if found is None:
            raise NotFound(EntityKind.CART_ITEM, item_id)
        return found

    def line_for(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product, quantity):
        """Add ``quantity`` of ``product``, merging into an existing line.

        The merged quantity is checked against current stock, so adding 3 to
        a line of 4 needs 7 units on hand. A rejected merge leaves the line
        as it was.
        """
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        existing = self.line_for(product.id)
        line_quantity = quantity + (existing.quantity if existing else 0)
        if product.stock < line_quantity:
            raise InsufficientStock(product.id, line_quantity, product.stock)

        now = datetime.now(UTC)

        if existing:
            existing.quantity = line_quantity
            existing.price = product.price
            item = existing
        else:
            item = CartItem(
                product_id=product.id,
                quantity=quantity,
                price=product.price,
                added_at=now,
            )
            self.add_items(item)

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                item_id=str(item.id),
                product_id=str(product.id),
                quantity=quantity,
                line_quantity=line_quantity,
                price=product.price,
            )
        )
        return item

    def update_item(self, item_id, quantity, product):
        """Set the quantity of a line. The price snapshot is left alone."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        item = self.item(item_id)
        if product.stock < quantity:
            raise InsufficientStock(product.id, quantity, product.stock)

        previous_quantity = item.quantity
        item.quantity = quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemUpdated(
                cart_id=str(self.id),
                item_id=str(item.id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def remove_item(self, item_id):
        item = self.item(item_id)
        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                item_id=str(item_id),
            )
        )

    def clear(self):
        """Remove every line. The cart itself stays."""
        items = list(self.items)
        for item in items:
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                items_removed=len(items),
            )
        )

"""Repository for the ShoppingCart aggregate."""

import structlog

from store.cart.cart import ShoppingCart
from store.domain import store

logger = structlog.get_logger(__name__)


@store.repository(part_of=ShoppingCart)
class CartRepository:
    def for_user(self, user_id) -> ShoppingCart:
        """Return the user's cart, creating an empty one on first access.

        Two first accesses racing each other can both create a cart. Every
        later lookup settles on the oldest one, so the duplicate is never used.
        """
        existing = self._dao.query.filter(user_id=str(user_id)).order_by("created_at").all().items
        if existing:
            if len(existing) > 1:
                logger.warning("User has more than one cart", user_id=str(user_id), carts=len(existing))
            return self.get(existing[0].id)

        cart = ShoppingCart.create(user_id=user_id)
        self.add(cart)
        logger.info("Created cart", cart_id=str(cart.id), user_id=str(user_id))
        return cart

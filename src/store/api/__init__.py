"""Store API package."""

from store.api.errors import register_error_handlers
from store.api.routes import cart_router, order_router, payment_router, product_router

__all__ = ["product_router", "cart_router", "order_router", "payment_router", "register_error_handlers"]

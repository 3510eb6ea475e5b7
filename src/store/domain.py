"""Store bounded context: Catalog stock, Shopping Cart, Orders and Payments.

Everything that must change together under one commit lives in this single
domain: placing an order touches the cart, the order and product stock, and
settling a payment touches the transaction and its order.
"""

from protean.domain import Domain

from store.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
store = Domain(name="store")

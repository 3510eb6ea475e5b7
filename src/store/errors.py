"""Error taxonomy for the store domain.

Caller errors are Protean exceptions so the request layer can map them
without inspecting messages:

- ``ValidationError`` (Protean's own) for malformed input,
- ``BusinessRuleViolation`` and its subclasses for rejected operations,
- ``NotFound`` for missing records, tagged with the kind of record.

Anything else, including ``InfrastructureError``, is an infrastructure
failure and is reported without internal detail.
"""

from enum import Enum

from protean.exceptions import ObjectNotFoundError, ValidationError


class EntityKind(Enum):
    PRODUCT = "Product"
    CART = "Cart"
    CART_ITEM = "CartItem"
    ORDER = "Order"
    TRANSACTION = "Transaction"


class NotFound(ObjectNotFoundError):
    """A referenced record does not exist."""

    def __init__(self, kind: EntityKind, identifier) -> None:
        self.kind = kind
        self.identifier = str(identifier)
        self.messages = {"_entity": [f"{kind.value} `{self.identifier}` does not exist"]}
        super().__init__(self.messages)


class BusinessRuleViolation(ValidationError):
    """An operation was rejected by a business rule. Nothing was changed."""


class EmptyCart(BusinessRuleViolation):
    def __init__(self, cart_id=None) -> None:
        self.cart_id = str(cart_id) if cart_id else None
        super().__init__({"cart": ["Cannot place an order from an empty cart"]})


class InsufficientStock(BusinessRuleViolation):
    def __init__(self, product_id, requested: int, available: int) -> None:
        self.product_id = str(product_id)
        self.requested = requested
        self.available = available
        super().__init__(
            {"quantity": [f"Insufficient stock for product {self.product_id}: {available} available, {requested} requested"]}
        )


class InvalidOrderState(BusinessRuleViolation):
    def __init__(self, order_id, current: str, message: str | None = None) -> None:
        self.order_id = str(order_id)
        self.current = current
        super().__init__({"order_status": [message or f"Operation not allowed for an order in {current} state"]})


class InvalidTransactionState(BusinessRuleViolation):
    def __init__(self, transaction_id, current: str) -> None:
        self.transaction_id = str(transaction_id)
        self.current = current
        super().__init__({"status": [f"Transaction is already {current}"]})


class InfrastructureError(Exception):
    """Storage or other infrastructure failure. Safe to resubmit."""


class StockConflict(InfrastructureError):
    """Stock kept changing under a reservation and the write never landed."""

    def __init__(self, product_id, attempts: int) -> None:
        self.product_id = str(product_id)
        self.attempts = attempts
        super().__init__(f"Stock for product {self.product_id} changed concurrently {attempts} times")

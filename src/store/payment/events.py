"""Domain events for the Transaction aggregate."""

from protean.fields import DateTime, Float, Identifier, String

from store.domain import store


@store.event(part_of="Transaction")
class TransactionCreated:
    """A payment attempt was opened against an order."""

    __version__ = "v1"

    transaction_id = Identifier(required=True)
    order_id = Identifier(required=True)
    amount = Float(required=True)
    payment_method = String(required=True)
    reference = String(required=True)
    created_at = DateTime(required=True)


@store.event(part_of="Transaction")
class TransactionSettled:
    """A pending payment attempt reached a terminal status."""

    __version__ = "v1"

    transaction_id = Identifier(required=True)
    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    settled_at = DateTime(required=True)

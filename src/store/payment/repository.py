"""Repository for the Transaction aggregate."""

from protean.exceptions import ObjectNotFoundError

from store.domain import store
from store.errors import EntityKind, NotFound
from store.payment.transaction import Transaction


@store.repository(part_of=Transaction)
class TransactionRepository:
    def find(self, transaction_id) -> Transaction:
        try:
            return self.get(str(transaction_id))
        except ObjectNotFoundError:
            raise NotFound(EntityKind.TRANSACTION, transaction_id) from None

    def for_order(self, order_id) -> list[Transaction]:
        """Every attempt made against the order, newest first."""
        return self._dao.query.filter(order_id=str(order_id)).order_by("-created_at").all().items

    def is_latest_attempt(self, transaction) -> bool:
        attempts = self.for_order(transaction.order_id)
        return bool(attempts) and str(attempts[0].id) == str(transaction.id)

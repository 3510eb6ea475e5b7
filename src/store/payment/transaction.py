"""Transaction aggregate: one payment attempt against an order.

State machine:
    pending → completed   (verification approved)
    pending → failed      (verification rejected)
    pending → cancelled   (cancelled by the buyer)

The three outcomes are terminal. Each settlement is mirrored onto the
order's payment_status by the handler that performs it.
"""

import time
from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean.fields import DateTime, Float, Identifier, String, Text

from store.domain import store
from store.errors import InvalidTransactionState
from store.order.order import PaymentStatus
from store.payment.events import TransactionCreated, TransactionSettled


class TransactionStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


PAYMENT_STATUS_FOR = {
    TransactionStatus.PENDING: PaymentStatus.PENDING,
    TransactionStatus.COMPLETED: PaymentStatus.PAID,
    TransactionStatus.FAILED: PaymentStatus.FAILED,
    TransactionStatus.CANCELLED: PaymentStatus.CANCELLED,
}


def generate_reference() -> str:
    return f"TXN_{int(time.time())}_{uuid4().hex[:8]}"


@store.aggregate
class Transaction:
    order_id = Identifier(required=True)
    amount = Float(required=True, min_value=0.0)
    payment_method = String(required=True, max_length=50)
    payment_data = Text()
    reference = String(required=True, max_length=50)
    status = String(choices=TransactionStatus, default=TransactionStatus.PENDING.value)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, order, payment_method, payment_data=None):
        """Open a pending attempt for the order's full total."""
        now = datetime.now(UTC)
        transaction = cls(
            order_id=order.id,
            amount=order.total_price,
            payment_method=payment_method,
            payment_data=payment_data,
            reference=generate_reference(),
            status=TransactionStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        transaction.raise_(
            TransactionCreated(
                transaction_id=str(transaction.id),
                order_id=str(order.id),
                amount=transaction.amount,
                payment_method=payment_method,
                reference=transaction.reference,
                created_at=now,
            )
        )
        return transaction

    @property
    def payment_status(self) -> PaymentStatus:
        return PAYMENT_STATUS_FOR[TransactionStatus(self.status)]

    def is_pending(self):
        return TransactionStatus(self.status) == TransactionStatus.PENDING

    def verify(self, submitted_reference, verifier, payment_data=None):
        """Ask the verifier about the submitted payment and settle on its answer."""
        self._ensure_pending()
        if payment_data:
            self.payment_data = payment_data

        result = verifier.verify(self.reference, submitted_reference, self.amount, self.payment_data)
        self.settle(TransactionStatus.COMPLETED if result.approved else TransactionStatus.FAILED)
        return result

    def cancel(self):
        self.settle(TransactionStatus.CANCELLED)

    def settle(self, status: TransactionStatus):
        self._ensure_pending()

        now = datetime.now(UTC)
        previous_status = self.status
        self.status = status.value
        self.updated_at = now

        self.raise_(
            TransactionSettled(
                transaction_id=str(self.id),
                order_id=str(self.order_id),
                previous_status=previous_status,
                new_status=status.value,
                settled_at=now,
            )
        )

    def _ensure_pending(self):
        if not self.is_pending():
            raise InvalidTransactionState(self.id, self.status)

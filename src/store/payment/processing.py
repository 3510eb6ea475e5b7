"""Payment processing: transaction commands and handler.

Every settlement writes the transaction and the order's payment_status in
the same Unit of Work, using the fixed mapping:

    completed → paid, failed → failed, cancelled → cancelled
"""

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from store.domain import store
from store.order.order import Order
from store.payment.gateway import get_verifier
from store.payment.transaction import Transaction

logger = structlog.get_logger(__name__)


@store.command(part_of="Transaction")
class CreateTransaction:
    order_id = Identifier(required=True)
    payment_method = String(required=True, max_length=50)
    payment_data = Text()
    user_id = Identifier()  # When present, the order must belong to this user


@store.command(part_of="Transaction")
class VerifyTransaction:
    transaction_id = Identifier(required=True)
    reference = String(required=True, max_length=50)
    payment_data = Text()


@store.command(part_of="Transaction")
class CancelTransaction:
    transaction_id = Identifier(required=True)


@store.command_handler(part_of=Transaction)
class PaymentHandler:
    @handle(CreateTransaction)
    def create_transaction(self, command):
        orders = current_domain.repository_for(Order)
        if command.user_id:
            order = orders.find_for_user(command.order_id, command.user_id)
        else:
            order = orders.find(command.order_id)

        transaction = Transaction.create(order, command.payment_method, command.payment_data)
        current_domain.repository_for(Transaction).add(transaction)

        logger.info(
            "Transaction created",
            transaction_id=str(transaction.id),
            order_id=str(order.id),
            amount=transaction.amount,
            reference=transaction.reference,
        )
        return str(transaction.id)

    @handle(VerifyTransaction)
    def verify_transaction(self, command):
        transactions = current_domain.repository_for(Transaction)
        transaction = transactions.find(command.transaction_id)

        result = transaction.verify(command.reference, get_verifier(), command.payment_data)
        self._settle(transactions, transaction)

        logger.info(
            "Transaction verified",
            transaction_id=str(transaction.id),
            order_id=str(transaction.order_id),
            status=transaction.status,
            reason=result.reason,
        )
        return transaction.status

    @handle(CancelTransaction)
    def cancel_transaction(self, command):
        transactions = current_domain.repository_for(Transaction)
        transaction = transactions.find(command.transaction_id)

        transaction.cancel()
        self._settle(transactions, transaction)

        logger.info(
            "Transaction cancelled",
            transaction_id=str(transaction.id),
            order_id=str(transaction.order_id),
        )
        return transaction.status

    def _settle(self, transactions, transaction):
        if not transactions.is_latest_attempt(transaction):
            logger.warning(
                "Settling an attempt that is not the latest for its order",
                transaction_id=str(transaction.id),
                order_id=str(transaction.order_id),
            )

        orders = current_domain.repository_for(Order)
        order = orders.find(transaction.order_id)
        order.record_payment_outcome(transaction.id, transaction.payment_status.value)

        transactions.add(transaction)
        orders.add(order)

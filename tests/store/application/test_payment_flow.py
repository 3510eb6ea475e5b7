"""Application tests for transactions and the order's payment status."""

from unittest.mock import patch

import pytest
from protean import current_domain

from store.cart.items import AddToCart
from store.errors import EntityKind, InvalidTransactionState, NotFound
from store.inventory.stocking import RegisterProduct
from store.order.order import Order, PaymentStatus
from store.order.placement import PlaceOrder
from store.payment.gateway import set_verifier
from store.payment.gateway.port import PaymentVerifier, VerificationResult
from store.payment.processing import CancelTransaction, CreateTransaction, VerifyTransaction
from store.payment.transaction import Transaction, TransactionStatus

USER = "user-001"


def _place_fifty_dollar_order():
    product_id = current_domain.process(
        RegisterProduct(name="Ceramic Mug", price=25.0, stock=10),
        asynchronous=False,
    )
    current_domain.process(AddToCart(user_id=USER, product_id=product_id, quantity=2), asynchronous=False)
    return current_domain.process(
        PlaceOrder(
            user_id=USER,
            payment_method="bank_transfer",
            shipping_method="standard",
            shipping_address="1 Main St, Springfield",
        ),
        asynchronous=False,
    )


def _create_transaction(order_id, user_id=None):
    return current_domain.process(
        CreateTransaction(order_id=order_id, payment_method="bank_transfer", payment_data="slip=001", user_id=user_id),
        asynchronous=False,
    )


def _transaction(transaction_id):
    return current_domain.repository_for(Transaction).get(transaction_id)


def _order(order_id):
    return current_domain.repository_for(Order).get(order_id)


class TestCreateTransaction:
    def test_amount_matches_order_total(self):
        order_id = _place_fifty_dollar_order()
        transaction = _transaction(_create_transaction(order_id))
        assert transaction.amount == 50.0
        assert transaction.status == TransactionStatus.PENDING.value
        assert str(transaction.order_id) == order_id

    def test_order_payment_status_stays_pending(self):
        order_id = _place_fifty_dollar_order()
        _create_transaction(order_id)
        assert _order(order_id).payment_status == PaymentStatus.PENDING.value

    def test_unknown_order(self):
        with pytest.raises(NotFound) as exc:
            _create_transaction("missing-order")
        assert exc.value.kind == EntityKind.ORDER

    def test_someone_elses_order(self):
        order_id = _place_fifty_dollar_order()
        with pytest.raises(NotFound):
            _create_transaction(order_id, user_id="user-002")

    def test_attempts_are_listed_newest_first(self):
        order_id = _place_fifty_dollar_order()
        first = _create_transaction(order_id)
        second = _create_transaction(order_id)
        attempts = current_domain.repository_for(Transaction).for_order(order_id)
        assert [str(t.id) for t in attempts] == [second, first]


class TestVerifyTransaction:
    def test_matching_reference_pays_the_order(self):
        order_id = _place_fifty_dollar_order()
        transaction_id = _create_transaction(order_id)
        reference = _transaction(transaction_id).reference

        status = current_domain.process(
            VerifyTransaction(transaction_id=transaction_id, reference=reference),
            asynchronous=False,
        )

        assert status == TransactionStatus.COMPLETED.value
        assert _transaction(transaction_id).status == TransactionStatus.COMPLETED.value
        assert _order(order_id).payment_status == PaymentStatus.PAID.value

    def test_wrong_reference_fails_the_payment(self):
        order_id = _place_fifty_dollar_order()
        transaction_id = _create_transaction(order_id)

        current_domain.process(
            VerifyTransaction(transaction_id=transaction_id, reference="TXN_0_00000000"),
            asynchronous=False,
        )

        assert _transaction(transaction_id).status == TransactionStatus.FAILED.value
        assert _order(order_id).payment_status == PaymentStatus.FAILED.value

    def test_verification_goes_through_the_active_verifier(self):
        class Approving(PaymentVerifier):
            def verify(self, reference, submitted_reference, amount, payment_data):
                return VerificationResult(approved=True)

        set_verifier(Approving())
        order_id = _place_fifty_dollar_order()
        transaction_id = _create_transaction(order_id)

        current_domain.process(
            VerifyTransaction(transaction_id=transaction_id, reference="anything"),
            asynchronous=False,
        )
        assert _order(order_id).payment_status == PaymentStatus.PAID.value

    def test_verifier_receives_the_order_amount(self, recording_verifier):
        order_id = _place_fifty_dollar_order()
        transaction_id = _create_transaction(order_id)
        current_domain.process(
            VerifyTransaction(transaction_id=transaction_id, reference="wrong"),
            asynchronous=False,
        )
        assert recording_verifier.calls[0]["amount"] == 50.0

    def test_settled_transaction_cannot_be_verified_again(self):
        order_id = _place_fifty_dollar_order()
        transaction_id = _create_transaction(order_id)
        reference = _transaction(transaction_id).reference
        current_domain.process(
            VerifyTransaction(transaction_id=transaction_id, reference="wrong"),
            asynchronous=False,
        )

        with pytest.raises(InvalidTransactionState):
            current_domain.process(
                VerifyTransaction(transaction_id=transaction_id, reference=reference),
                asynchronous=False,
            )
        assert _transaction(transaction_id).status == TransactionStatus.FAILED.value
        assert _order(order_id).payment_status == PaymentStatus.FAILED.value

    def test_retry_after_failure_pays_the_order(self):
        order_id = _place_fifty_dollar_order()
        failed = _create_transaction(order_id)
        current_domain.process(VerifyTransaction(transaction_id=failed, reference="wrong"), asynchronous=False)

        retry = _create_transaction(order_id)
        current_domain.process(
            VerifyTransaction(transaction_id=retry, reference=_transaction(retry).reference),
            asynchronous=False,
        )
        assert _order(order_id).payment_status == PaymentStatus.PAID.value

    def test_older_attempt_still_settles_and_is_logged(self):
        order_id = _place_fifty_dollar_order()
        older = _create_transaction(order_id)
        _create_transaction(order_id)

        with patch("store.payment.processing.logger") as logger:
            current_domain.process(
                VerifyTransaction(transaction_id=older, reference=_transaction(older).reference),
                asynchronous=False,
            )

        assert logger.warning.called
        assert _order(order_id).payment_status == PaymentStatus.PAID.value

    def test_unknown_transaction(self):
        with pytest.raises(NotFound) as exc:
            current_domain.process(
                VerifyTransaction(transaction_id="missing", reference="TXN_0_00000000"),
                asynchronous=False,
            )
        assert exc.value.kind == EntityKind.TRANSACTION


class TestCancelTransaction:
    def test_cancel_sets_order_payment_cancelled(self):
        order_id = _place_fifty_dollar_order()
        transaction_id = _create_transaction(order_id)

        current_domain.process(CancelTransaction(transaction_id=transaction_id), asynchronous=False)

        assert _transaction(transaction_id).status == TransactionStatus.CANCELLED.value
        assert _order(order_id).payment_status == PaymentStatus.CANCELLED.value

    def test_completed_transaction_cannot_be_cancelled(self):
        order_id = _place_fifty_dollar_order()
        transaction_id = _create_transaction(order_id)
        reference = _transaction(transaction_id).reference
        current_domain.process(VerifyTransaction(transaction_id=transaction_id, reference=reference), asynchronous=False)

        with pytest.raises(InvalidTransactionState):
            current_domain.process(CancelTransaction(transaction_id=transaction_id), asynchronous=False)
        assert _order(order_id).payment_status == PaymentStatus.PAID.value

    def test_cancelling_payment_leaves_order_status_alone(self):
        order_id = _place_fifty_dollar_order()
        transaction_id = _create_transaction(order_id)
        current_domain.process(CancelTransaction(transaction_id=transaction_id), asynchronous=False)
        assert _order(order_id).order_status == "pending"

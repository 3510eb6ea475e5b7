"""Shared BDD fixtures and step definitions for the store."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then

from store.cart.cart import ShoppingCart
from store.cart.items import AddToCart
from store.inventory.product import Product
from store.inventory.stocking import RegisterProduct, SetStock
from store.order.order import Order
from store.order.placement import PlaceOrder
from store.order.status import UpdateOrderStatus
from store.payment.processing import CreateTransaction
from store.payment.transaction import Transaction

SHOPPER = "shopper-001"
OTHER_SHOPPER = "shopper-002"


@pytest.fixture()
def context():
    return {"products": {}, "errors": {}}


def place_order(user_id):
    return current_domain.process(
        PlaceOrder(
            user_id=user_id,
            payment_method="credit_card",
            shipping_method="standard",
            shipping_address="1 Main St, Springfield",
        ),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" with {stock:d} units at {price:f}'))
def _(context, name, stock, price):
    context["products"][name] = current_domain.process(
        RegisterProduct(name=name, price=price, stock=stock),
        asynchronous=False,
    )


@given(parsers.cfparse('the shopper has {quantity:d} "{name}" in the cart'))
def _(context, quantity, name):
    current_domain.process(
        AddToCart(user_id=SHOPPER, product_id=context["products"][name], quantity=quantity),
        asynchronous=False,
    )


@given(parsers.cfparse('another shopper has {quantity:d} "{name}" in the cart'))
def _(context, quantity, name):
    current_domain.process(
        AddToCart(user_id=OTHER_SHOPPER, product_id=context["products"][name], quantity=quantity),
        asynchronous=False,
    )


@given(parsers.cfparse('"{name}" stock is set to {stock:d}'))
def _(context, name, stock):
    current_domain.process(SetStock(product_id=context["products"][name], stock=stock), asynchronous=False)


@given("the shopper has placed an order")
def _(context):
    context["order_id"] = place_order(SHOPPER)


@given(parsers.cfparse('the order has been moved to "{status}"'))
def _(context, status):
    current_domain.process(UpdateOrderStatus(order_id=context["order_id"], status=status), asynchronous=False)


@given("a payment has been opened for the order")
def _(context):
    context["transaction_id"] = current_domain.process(
        CreateTransaction(order_id=context["order_id"], payment_method="bank_transfer"),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{name}" has {stock:d} units in stock'))
def _(context, name, stock):
    assert current_domain.repository_for(Product).get(context["products"][name]).stock == stock


@then(parsers.cfparse("the cart holds {count:d} lines"))
def _(count):
    assert len(current_domain.repository_for(ShoppingCart).for_user(SHOPPER).items) == count


@then(parsers.cfparse('the order status is "{status}"'))
def _(context, status):
    assert current_domain.repository_for(Order).get(context["order_id"]).order_status == status


@then(parsers.cfparse('the order payment status is "{status}"'))
def _(context, status):
    assert current_domain.repository_for(Order).get(context["order_id"]).payment_status == status


@then(parsers.cfparse('the payment status is "{status}"'))
def _(context, status):
    assert current_domain.repository_for(Transaction).get(context["transaction_id"]).status == status

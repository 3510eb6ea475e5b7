"""BDD tests for checkout."""

from protean import current_domain
from pytest_bdd import parsers, scenarios, then, when

from store.errors import EmptyCart, InsufficientStock
from store.order.order import Order
from store.order.placement import PlaceOrder

SHOPPER = "shopper-001"
OTHER_SHOPPER = "shopper-002"

scenarios("features/checkout.feature")


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
# When steps
# ---------------------------------------------------------------------------
@when("the shopper places an order")
def _(context):
    try:
        context["order_id"] = place_order(SHOPPER)
    except (EmptyCart, InsufficientStock) as exc:
        context["errors"][SHOPPER] = exc


@when("the other shopper places an order")
def _(context):
    try:
        place_order(OTHER_SHOPPER)
    except InsufficientStock as exc:
        context["errors"][OTHER_SHOPPER] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the order total is {total:f}"))
def _(context, total):
    assert current_domain.repository_for(Order).get(context["order_id"]).total_price == total


@then("the order is rejected for insufficient stock")
def _(context):
    assert isinstance(context["errors"].get(SHOPPER), InsufficientStock)
    assert "order_id" not in context


@then("the order is rejected because the cart is empty")
def _(context):
    assert isinstance(context["errors"].get(SHOPPER), EmptyCart)


@then("the other shopper's order is rejected for insufficient stock")
def _(context):
    assert SHOPPER not in context["errors"]
    assert isinstance(context["errors"].get(OTHER_SHOPPER), InsufficientStock)

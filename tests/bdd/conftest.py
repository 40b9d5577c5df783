"""Shared BDD fixtures and step definitions for checkout and order status."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when

from marketplace.analytics.seller_analytics import SellerAnalytics
from marketplace.catalogue.product import Product
from marketplace.checkout.placement import PlaceOrder
from marketplace.order.order import Order

BUYER_ID = "buyer-bdd"

ADDRESS = {
    "full_address": "221 Residency Road",
    "city": "Bengaluru",
    "state": "Karnataka",
    "pincode": "560025",
    "mobile": "9800000001",
}


@pytest.fixture()
def sellers():
    return {}


@pytest.fixture()
def products():
    return {}


@pytest.fixture()
def cart():
    return []


@pytest.fixture()
def checkout():
    """Result of the last checkout: order ids or the error raised."""
    return {"order_ids": [], "error": None}


def _order_for(sellers, checkout, name):
    repo = current_domain.repository_for(Order)
    for order_id in checkout["order_ids"]:
        order = repo.get(order_id)
        if str(order.seller_id) == sellers[name]:
            return order
    raise AssertionError(f"No order for seller {name}")


def _place(cart, coupon_code=None):
    command = PlaceOrder(
        buyer_id=BUYER_ID,
        items=json.dumps(cart),
        address=json.dumps(ADDRESS),
        payment_mode="COD",
        coupon_code=coupon_code,
    )
    return current_domain.process(command, asynchronous=False)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a seller "{name}" in pincode "{pincode}"'))
def _(register_account, sellers, name, pincode):
    sellers[name] = register_account(role="SELLER", name=name, mobile="9810000000", pincode=pincode)


@given(
    parsers.cfparse(
        'seller "{name}" lists "{title}" at {price:g} with {stock:d} in stock and {commission:g}% commission'
    )
)
def _(list_product, sellers, products, name, title, price, stock, commission):
    products[title] = list_product(
        sellers[name], price=price, stock=stock, title=title, commission_percent=commission
    )


@given(parsers.cfparse('an offer "{code}" worth {value:g} off'))
def _(create_offer, code, value):
    create_offer(code=code, discount_value=value)


@given(parsers.cfparse('the cart holds {quantity:d} of "{title}"'))
def _(cart, products, quantity, title):
    cart.append({"product_id": products[title], "quantity": quantity})


@given("the buyer has checked out")
def _(cart, checkout):
    checkout["order_ids"] = _place(cart)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the buyer checks out")
def _(cart, checkout):
    try:
        checkout["order_ids"] = _place(cart)
    except ValidationError as exc:
        checkout["error"] = exc


@when(parsers.cfparse('the buyer checks out with coupon "{code}"'))
def _(cart, checkout, code):
    try:
        checkout["order_ids"] = _place(cart, coupon_code=code)
    except ValidationError as exc:
        checkout["error"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.re(r"(?P<count>\d+) orders? (is|are) placed"))
def _(checkout, count):
    assert checkout["error"] is None
    assert len(checkout["order_ids"]) == int(count)


@then(
    parsers.cfparse(
        'the order for seller "{name}" has subtotal {subtotal:g}, shipping {shipping:g} and discount {discount:g}'
    )
)
def _(sellers, checkout, name, subtotal, shipping, discount):
    order = _order_for(sellers, checkout, name)
    assert order.subtotal == subtotal
    assert order.shipping_charge == shipping
    assert order.discount_amount == discount


@then(parsers.cfparse('the order for seller "{name}" totals {total:g}'))
def _(sellers, checkout, name, total):
    assert _order_for(sellers, checkout, name).total_amount == total


@then(parsers.cfparse('seller "{name}" earns {earning:g} on the order'))
def _(sellers, checkout, name, earning):
    order = _order_for(sellers, checkout, name)
    analytics = current_domain.repository_for(SellerAnalytics).find_by_order(str(order.id))
    assert analytics.seller_earning == earning


@then(parsers.cfparse('"{title}" has {stock:d} left in stock'))
def _(products, title, stock):
    assert current_domain.repository_for(Product).get(products[title]).stock == stock


@then(parsers.cfparse('the checkout fails with "{error_type}"'))
def _(checkout, error_type):
    assert checkout["error"] is not None
    assert checkout["error"].error_type == error_type


@then("no orders exist")
def _():
    assert current_domain.repository_for(Order).find_all() == []

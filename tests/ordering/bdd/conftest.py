"""Shared BDD fixtures and step definitions for the Ordering domain."""

import json
from decimal import Decimal

import pytest
from ordering.cart.cart import Cart
from ordering.cart.items import AddToCart
from ordering.catalog.product import CatalogProduct
from ordering.checkout.placement import PlaceOrder
from ordering.errors import OrderingError
from ordering.order.order import Order
from protean import current_domain
from pytest_bdd import given, parsers, then, when


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def user_id():
    return "user-bdd-001"


@pytest.fixture()
def outcome():
    """Container for the placed order id and any captured error."""
    return {"order_id": None, "exc": None}


def _catalog_repo():
    return current_domain.repository_for(CatalogProduct)


def _place_order(user_id, shipping_address):
    return current_domain.process(
        PlaceOrder(
            user_id=user_id,
            shipping_address=json.dumps(shipping_address),
            payment_method="credit_card",
        ),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("the catalog contains:")
def catalog_contains(datatable):
    header, *records = datatable
    for record in records:
        row = dict(zip(header, record, strict=True))
        _catalog_repo().add(
            CatalogProduct.register(
                product_id=row["product_id"],
                name=row["name"],
                price=Decimal(row["price"]),
                stock=int(row["stock"]),
            )
        )


@given(parsers.cfparse('the customer has {quantity:d} of "{product_id}" in the cart'))
def customer_has_in_cart(user_id, quantity, product_id):
    current_domain.process(
        AddToCart(user_id=user_id, product_id=product_id, quantity=quantity),
        asynchronous=False,
    )


@given(parsers.cfparse('product "{product_id}" has been withdrawn'))
def product_withdrawn(product_id):
    product = _catalog_repo().get(product_id)
    product.withdraw()
    _catalog_repo().add(product)


@given("the customer placed an order")
def customer_placed_order(user_id, shipping_address, outcome):
    outcome["order_id"] = _place_order(user_id, shipping_address)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the customer places an order")
def customer_places_order(user_id, shipping_address, outcome):
    try:
        outcome["order_id"] = _place_order(user_id, shipping_address)
    except OrderingError as exc:
        outcome["exc"] = exc


@when(parsers.cfparse('product "{product_id}" is repriced to {price}'))
def product_repriced(product_id, price):
    product = _catalog_repo().get(product_id)
    product.reprice(Decimal(price))
    _catalog_repo().add(product)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.re(r"the order (?P<component>subtotal|tax|shipping|total) is (?P<amount>\d+\.\d{2})"))
def order_amount(outcome, component, amount):
    order = current_domain.repository_for(Order).get(outcome["order_id"])
    assert Decimal(getattr(order.pricing, component)) == Decimal(amount)


@then("the customer's cart is empty")
def cart_is_empty(user_id):
    assert current_domain.repository_for(Cart).get(user_id).is_empty


@then(parsers.cfparse('the customer\'s cart still holds {quantity:d} of "{product_id}"'))
def cart_still_holds(user_id, quantity, product_id):
    assert current_domain.repository_for(Cart).get(user_id).quantity_of(product_id) == quantity


@then("the customer has no orders")
def customer_has_no_orders(user_id):
    assert current_domain.repository_for(Order).for_user(user_id) == []

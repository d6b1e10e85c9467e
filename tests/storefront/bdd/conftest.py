"""Shared BDD fixtures and step definitions for checkout."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then
from storefront.order.placement import place_order
from storefront.order.status import UpdateOrderStatus
from storefront.product.product import Product


@pytest.fixture()
def products_by_name():
    return {}


@pytest.fixture()
def outcome():
    """Holds the order id or the error raised by the last When step."""
    return {}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.parse('the catalogue holds "{name}" priced {price:f} with {stock:d} in stock'))
def _(products_by_name, name, price, stock):
    product = Product.create(name=name, price=price, stock=stock)
    current_domain.repository_for(Product).add(product)
    products_by_name[name] = product.id


@given(parsers.parse('the shopper has ordered {quantity:d} "{name}"'), target_fixture="order_id")
def _(products_by_name, quantity, name):
    return place_order(
        user_id="shopper-1",
        user_email="shopper@example.com",
        products=[{"product_id": products_by_name[name], "quantity": quantity}],
    )


@given("the order has been shipped")
def _(order_id):
    current_domain.process(UpdateOrderStatus(order_id=order_id, status="shipped"), asynchronous=False)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.parse('"{name}" has {stock:d} in stock'))
def _(products_by_name, name, stock):
    assert current_domain.repository_for(Product).get(products_by_name[name]).stock == stock


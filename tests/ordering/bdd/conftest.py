"""Shared BDD fixtures and step definitions for the Ordering domain."""

import json

import pytest
from ordering.order.creation import CreateOrder
from ordering.order.order import Order
from ordering.order.status import UpdateOrderStatus
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, then


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured domain errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse(
        "an order with subtotal {subtotal:f}, tax {tax:f}, shipping {shipping:f} and discount {discount:f}"
    ),
    target_fixture="order_id",
)
def order_with_amounts(subtotal, tax, shipping, discount):
    return current_domain.process(
        CreateOrder(
            user_id="user-001",
            subtotal=subtotal,
            tax_amount=tax,
            shipping_cost=shipping,
            discount_amount=discount,
        ),
        asynchronous=False,
    )


@given(
    parsers.cfparse(
        'an order for {quantity:d} units of product "{product_id}" at {price:f} '
        "with tax {tax:f} and shipping {shipping:f}"
    ),
    target_fixture="order_id",
)
def order_for_product(quantity, product_id, price, tax, shipping):
    line = {"product_id": product_id, "quantity": quantity, "unit_price": price}
    return current_domain.process(
        CreateOrder(
            user_id="user-001",
            items=json.dumps([line]),
            subtotal=round(quantity * price, 2),
            tax_amount=tax,
            shipping_cost=shipping,
        ),
        asynchronous=False,
    )


@given(parsers.cfparse('the order status is "{status}"'))
def order_in_status(order_id, status):
    current_domain.process(UpdateOrderStatus(order_id=order_id, status=status), asynchronous=False)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the order total is {total:f}"))
def order_total_is(order_id, total):
    order = current_domain.repository_for(Order).get(order_id)
    assert order.total_amount == pytest.approx(total, abs=0.01)


@then(parsers.cfparse('the order status is now "{status}"'))
def order_status_is(order_id, status):
    assert current_domain.repository_for(Order).get(order_id).status == status


@then(parsers.cfparse('the order notes read "{notes}"'))
def order_notes_read(order_id, notes):
    assert current_domain.repository_for(Order).get(order_id).notes == notes

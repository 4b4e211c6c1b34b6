"""Shared BDD fixtures and step definitions for the Catalogue domain."""

import pytest
from catalogue.product.creation import CreateProduct
from catalogue.product.product import Product
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, then


def _create_product(**overrides):
    defaults = {"name": "Test Product", "price": 10.00, "category": "ELECTRONICS"}
    defaults.update(overrides)
    return current_domain.process(CreateProduct(**defaults), asynchronous=False)


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
@given("a product with no ratings", target_fixture="product_id")
def unrated_product():
    return _create_product()


@given(parsers.cfparse("a product with {stock:d} units in stock"), target_fixture="product_id")
def stocked_product(stock):
    return _create_product(stock_quantity=stock)


@given(
    parsers.cfparse('a product with SKU "{sku}" priced {price:f} with {stock:d} units in stock'),
    target_fixture="product_id",
)
def product_with_sku(sku, price, stock):
    return _create_product(sku=sku, price=price, stock_quantity=stock)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.re(r"the product has (?P<stock>-?\d+) units and is (?P<availability>in stock|out of stock)"))
def stock_level(product_id, stock, availability):
    product = current_domain.repository_for(Product).get(product_id)
    assert product.stock_quantity == int(stock)
    assert product.is_in_stock() is (availability == "in stock")

"""Tests for the Product aggregate: creation, details and derived values."""

from decimal import Decimal

import pytest
from catalogue.product.events import ProductCreated, ProductDetailsUpdated, ProductDiscontinued
from catalogue.product.product import Product, ProductCategory, ProductStatus
from protean.exceptions import ValidationError


def _make_product(**overrides):
    defaults = {"name": "Trail Runner", "price": 89.99, "category": "SPORTS", "stock_quantity": 10}
    defaults.update(overrides)
    return Product.create(**defaults)


class TestProductCreation:
    def test_defaults(self):
        product = _make_product()
        assert product.status == ProductStatus.ACTIVE.value
        assert product.rating_average == 0.0
        assert product.rating_count == 0
        assert product.view_count == 0
        assert product.sold_count == 0
        assert product.featured is False
        assert product.bestseller is False

    def test_category_by_name(self):
        product = _make_product(category="home_and_garden")
        assert product.category == ProductCategory.HOME_AND_GARDEN.value

    def test_unknown_category_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _make_product(category="WEAPONS")
        assert "category" in exc.value.messages

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            _make_product(price=-1.0)

    def test_name_too_short(self):
        with pytest.raises(ValidationError):
            _make_product(name="X")

    def test_price_rounded_to_cents(self):
        assert _make_product(price=10.005).price == 10.01

    def test_explicit_status(self):
        assert _make_product(status="INACTIVE").status == ProductStatus.INACTIVE.value

    def test_raises_product_created(self):
        product = _make_product(sku="TRAIL-001")
        assert len(product._events) == 1
        event = product._events[0]
        assert isinstance(event, ProductCreated)
        assert event.sku == "TRAIL-001"
        assert event.stock_quantity == 10

    def test_rating_average_cannot_be_set_without_ratings(self):
        product = _make_product()
        with pytest.raises(ValidationError):
            product.rating_average = 4.0


class TestDerivedValues:
    def test_in_stock_when_positive(self):
        assert _make_product(stock_quantity=1).is_in_stock() is True

    @pytest.mark.parametrize("stock", [0, -3])
    def test_not_in_stock(self, stock):
        assert _make_product(stock_quantity=stock).is_in_stock() is False

    def test_out_of_stock_status_is_informational(self):
        product = _make_product(stock_quantity=5, status="OUT_OF_STOCK")
        assert product.is_in_stock() is True

    def test_discount(self):
        product = _make_product(price=75.00, original_price=100.00)
        assert product.has_discount() is True
        assert product.discount_percentage() == Decimal("25.00")

    def test_discount_percentage_rounds_ratio_half_up(self):
        # (30 - 20) / 30 = 0.333.. -> 0.33 -> 33
        product = _make_product(price=20.00, original_price=30.00)
        assert product.discount_percentage() == Decimal("33.00")

    def test_no_discount_without_original_price(self):
        product = _make_product()
        assert product.has_discount() is False
        assert product.discount_percentage() == Decimal("0.00")

    def test_no_discount_when_original_is_lower(self):
        product = _make_product(price=50.00, original_price=40.00)
        assert product.has_discount() is False


class TestUpdateDetails:
    def test_overwrites_given_fields(self):
        product = _make_product(brand="Acme")
        product._events.clear()
        product.update_details(name="Trail Runner 2", price=99.5, brand=None)

        assert product.name == "Trail Runner 2"
        assert product.price == 99.5
        assert product.brand == "Acme"
        assert isinstance(product._events[-1], ProductDetailsUpdated)

    def test_category_validated(self):
        product = _make_product()
        with pytest.raises(ValidationError):
            product.update_details(category="SPACESHIPS")


class TestDiscontinue:
    def test_discontinue(self):
        product = _make_product()
        product._events.clear()
        product.discontinue()

        assert product.status == ProductStatus.DISCONTINUED.value
        event = product._events[-1]
        assert isinstance(event, ProductDiscontinued)
        assert event.previous_status == ProductStatus.ACTIVE.value


class TestMerchandisingFlags:
    def test_set_featured(self):
        product = _make_product()
        product.set_featured(True)
        assert product.featured is True
        product.set_featured(False)
        assert product.featured is False

    def test_set_bestseller(self):
        product = _make_product()
        product.set_bestseller(True)
        assert product.bestseller is True

"""Application tests for the product command handlers."""

import pytest
from catalogue.product.creation import CreateProduct
from catalogue.product.details import UpdateProduct
from catalogue.product.lifecycle import DeleteProduct
from catalogue.product.merchandising import SetBestseller, SetFeatured
from catalogue.product.metrics import IncrementSoldCount, IncrementViewCount
from catalogue.product.product import Product
from catalogue.product.queries import is_in_stock
from catalogue.product.rating import UpdateRating
from catalogue.product.stock import RecordSale, UpdateStockQuantity
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain
from shared.exceptions import ConflictError, InvalidStateError, http_status_for


def _create_product(**overrides):
    defaults = {"name": "Wireless Mouse", "price": 19.99, "category": "ELECTRONICS", "stock_quantity": 5}
    defaults.update(overrides)
    return current_domain.process(CreateProduct(**defaults), asynchronous=False)


def _get(product_id):
    return current_domain.repository_for(Product).get(product_id)


class TestCreateProductHandler:
    def test_create_product(self):
        product_id = _create_product(sku="ABC1")
        product = _get(product_id)
        assert product.sku == "ABC1"
        assert product.status == "ACTIVE"
        assert product.stock_quantity == 5

    def test_duplicate_sku_is_conflict(self):
        _create_product(sku="ABC1")
        with pytest.raises(ConflictError) as exc:
            _create_product(sku="ABC1", name="Another Mouse")
        assert "sku" in exc.value.messages
        assert http_status_for(exc.value) == 409

    def test_duplicate_barcode_is_conflict(self):
        _create_product(barcode="0012345678905")
        with pytest.raises(ConflictError) as exc:
            _create_product(barcode="0012345678905")
        assert "barcode" in exc.value.messages

    def test_products_without_sku_do_not_conflict(self):
        _create_product()
        _create_product()
        assert current_domain.repository_for(Product).count_active() == 2

    def test_conflict_is_a_validation_error(self):
        _create_product(sku="ABC1")
        with pytest.raises(ValidationError):
            _create_product(sku="ABC1")


class TestUpdateProductHandler:
    def test_update_fields(self):
        product_id = _create_product(sku="ABC1")
        current_domain.process(
            UpdateProduct(product_id=product_id, price=17.49, original_price=19.99, brand="Logi"),
            asynchronous=False,
        )
        product = _get(product_id)
        assert product.price == 17.49
        assert product.brand == "Logi"
        assert product.has_discount() is True

    def test_keeping_own_sku_is_not_a_conflict(self):
        product_id = _create_product(sku="ABC1")
        current_domain.process(UpdateProduct(product_id=product_id, sku="ABC1", name="Renamed"), asynchronous=False)
        assert _get(product_id).name == "Renamed"

    def test_taking_another_products_sku_is_a_conflict(self):
        _create_product(sku="ABC1")
        other_id = _create_product(sku="XYZ9")
        with pytest.raises(ConflictError):
            current_domain.process(UpdateProduct(product_id=other_id, sku="ABC1"), asynchronous=False)
        assert _get(other_id).sku == "XYZ9"

    def test_unknown_product(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(UpdateProduct(product_id="missing", name="Nope"), asynchronous=False)


class TestDeleteProductHandler:
    def test_delete_marks_discontinued(self):
        product_id = _create_product()
        current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
        assert _get(product_id).status == "DISCONTINUED"


class TestStockHandlers:
    def test_update_stock_quantity(self):
        product_id = _create_product(stock_quantity=10)
        current_domain.process(UpdateStockQuantity(product_id=product_id, quantity=-3), asynchronous=False)
        assert _get(product_id).stock_quantity == 7
        assert is_in_stock(product_id) is True

        current_domain.process(UpdateStockQuantity(product_id=product_id, quantity=-7), asynchronous=False)
        assert _get(product_id).stock_quantity == 0
        assert is_in_stock(product_id) is False

    def test_negative_stock_allowed_by_default(self):
        product_id = _create_product(stock_quantity=1)
        current_domain.process(UpdateStockQuantity(product_id=product_id, quantity=-4), asynchronous=False)
        assert _get(product_id).stock_quantity == -3

    def test_reject_policy_from_config(self, use_stock_policy):
        use_stock_policy("reject")
        product_id = _create_product(stock_quantity=1)
        with pytest.raises(InvalidStateError):
            current_domain.process(UpdateStockQuantity(product_id=product_id, quantity=-4), asynchronous=False)
        assert _get(product_id).stock_quantity == 1

    def test_clamp_policy_from_config(self, use_stock_policy):
        use_stock_policy("clamp")
        product_id = _create_product(stock_quantity=1)
        current_domain.process(UpdateStockQuantity(product_id=product_id, quantity=-4), asynchronous=False)
        assert _get(product_id).stock_quantity == 0

    def test_record_sale(self):
        product_id = _create_product(stock_quantity=5)
        current_domain.process(RecordSale(product_id=product_id, quantity=2), asynchronous=False)
        product = _get(product_id)
        assert product.sold_count == 2
        assert product.stock_quantity == 3

    def test_is_in_stock_unknown_product(self):
        with pytest.raises(ObjectNotFoundError):
            is_in_stock("missing")


class TestMetricsHandlers:
    def test_increment_view_count(self):
        product_id = _create_product()
        for _ in range(3):
            current_domain.process(IncrementViewCount(product_id=product_id), asynchronous=False)
        assert _get(product_id).view_count == 3

    def test_increment_sold_count(self):
        product_id = _create_product(stock_quantity=5)
        current_domain.process(IncrementSoldCount(product_id=product_id, quantity=4), asynchronous=False)
        product = _get(product_id)
        assert product.sold_count == 4
        assert product.stock_quantity == 5

    def test_sold_quantity_must_be_positive(self):
        product_id = _create_product()
        with pytest.raises(ValidationError):
            current_domain.process(IncrementSoldCount(product_id=product_id, quantity=0), asynchronous=False)


class TestRatingHandler:
    def test_ratings_accumulate(self):
        product_id = _create_product()
        current_domain.process(UpdateRating(product_id=product_id, rating=4), asynchronous=False)
        current_domain.process(UpdateRating(product_id=product_id, rating=2), asynchronous=False)

        product = _get(product_id)
        assert product.rating_average == 3.00
        assert product.rating_count == 2

    def test_rating_out_of_range(self):
        product_id = _create_product()
        with pytest.raises(ValidationError):
            current_domain.process(UpdateRating(product_id=product_id, rating=6), asynchronous=False)


class TestMerchandisingHandlers:
    def test_set_featured(self):
        product_id = _create_product()
        current_domain.process(SetFeatured(product_id=product_id, featured=True), asynchronous=False)
        assert _get(product_id).featured is True

    def test_set_bestseller(self):
        product_id = _create_product()
        current_domain.process(SetBestseller(product_id=product_id, bestseller=True), asynchronous=False)
        current_domain.process(SetBestseller(product_id=product_id, bestseller=False), asynchronous=False)
        assert _get(product_id).bestseller is False

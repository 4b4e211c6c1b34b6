"""Product aggregate root with its derived metrics.

Stock, view and sold counters, and the rating average are owned by the
aggregate and only change through its methods. The rating average is the
running mean of every recorded rating, rounded half-up to two places.
"""

from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ConfigurationError, ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String

from catalogue.domain import catalogue
from shared.exceptions import InvalidStateError
from shared.money import HUNDRED, ZERO, round_half_up, to_decimal
from shared.queries import coerce_enum
from shared.settings import custom_setting

MIN_RATING = 1
MAX_RATING = 5


class ProductStatus(Enum):
    """Enumeration of product lifecycle statuses."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    OUT_OF_STOCK = "OUT_OF_STOCK"
    DISCONTINUED = "DISCONTINUED"


class ProductCategory(Enum):
    ELECTRONICS = "ELECTRONICS"
    CLOTHING = "CLOTHING"
    BOOKS = "BOOKS"
    HOME_AND_GARDEN = "HOME_AND_GARDEN"
    SPORTS = "SPORTS"
    BEAUTY = "BEAUTY"
    AUTOMOTIVE = "AUTOMOTIVE"
    TOYS = "TOYS"
    FOOD = "FOOD"
    HEALTH = "HEALTH"


class StockPolicy(Enum):
    """What happens when a stock adjustment would take the level below zero."""

    ALLOW = "allow"
    REJECT = "reject"
    CLAMP = "clamp"


def stock_policy() -> StockPolicy:
    """Return the stock policy configured under ``[custom] stock_policy``."""
    name = custom_setting("stock_policy", StockPolicy.ALLOW.value)
    try:
        return StockPolicy(str(name).lower())
    except ValueError:
        raise ConfigurationError(f"Unknown stock policy '{name}'") from None


@catalogue.aggregate
class Product:
    """Product aggregate root."""

    name: String(required=True, min_length=2, max_length=255)
    description: String(max_length=1000)
    price: Float(required=True, min_value=0.0)
    original_price: Float(min_value=0.0)
    stock_quantity: Integer(default=0)
    sku: String(max_length=50)
    barcode: String(max_length=50)
    weight_kg: Float(min_value=0.0)
    dimensions_cm: String(max_length=50)
    status: String(max_length=20, choices=ProductStatus, default=ProductStatus.ACTIVE.value)
    category: String(required=True, max_length=20, choices=ProductCategory)
    brand: String(max_length=100)
    model: String(max_length=100)
    manufacturer: String(max_length=100)
    warranty_months: Integer(min_value=0)
    featured: Boolean(default=False)
    bestseller: Boolean(default=False)
    rating_average: Float(default=0.0, min_value=0.0, max_value=5.0)
    rating_count: Integer(default=0, min_value=0)
    view_count: Integer(default=0, min_value=0)
    sold_count: Integer(default=0, min_value=0)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def unrated_product_has_zero_average(self):
        if not self.rating_count and self.rating_average:
            raise ValidationError({"rating_average": ["Rating average must be zero when there are no ratings"]})

    @classmethod
    def create(
        cls,
        name,
        price,
        category,
        description=None,
        original_price=None,
        stock_quantity=0,
        sku=None,
        barcode=None,
        weight_kg=None,
        dimensions_cm=None,
        status=None,
        brand=None,
        model=None,
        manufacturer=None,
        warranty_months=None,
        featured=False,
        bestseller=False,
    ):
        from catalogue.product.events import ProductCreated

        now = datetime.now(UTC)
        product = cls(
            name=name,
            description=description,
            price=_price(price),
            original_price=_price(original_price),
            stock_quantity=stock_quantity or 0,
            sku=sku,
            barcode=barcode,
            weight_kg=weight_kg,
            dimensions_cm=dimensions_cm,
            status=coerce_enum(ProductStatus, status, "status").value if status else ProductStatus.ACTIVE.value,
            category=coerce_enum(ProductCategory, category, "category").value,
            brand=brand,
            model=model,
            manufacturer=manufacturer,
            warranty_months=warranty_months,
            featured=bool(featured),
            bestseller=bool(bestseller),
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=product.name,
                sku=product.sku,
                category=product.category,
                price=product.price,
                stock_quantity=product.stock_quantity,
                status=product.status,
                created_at=now,
            )
        )
        return product

    def _touch(self):
        now = datetime.now(UTC)
        self.updated_at = now
        return now

    # -------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------
    def is_in_stock(self) -> bool:
        return (self.stock_quantity or 0) > 0

    def has_discount(self) -> bool:
        return self.original_price is not None and to_decimal(self.original_price) > to_decimal(self.price)

    def discount_percentage(self) -> Decimal:
        """Whole-percent markdown from ``original_price``, zero without a discount."""
        if not self.has_discount():
            return ZERO
        original = to_decimal(self.original_price)
        ratio = round_half_up((original - to_decimal(self.price)) / original)
        return ratio * HUNDRED

    # -------------------------------------------------------------------
    # Details
    # -------------------------------------------------------------------
    def update_details(self, **details):
        """Overwrite descriptive fields and pricing. ``None`` leaves a field unchanged."""
        from catalogue.product.events import ProductDetailsUpdated

        details = {key: value for key, value in details.items() if value is not None}
        if "price" in details:
            details["price"] = _price(details["price"])
        if "original_price" in details:
            details["original_price"] = _price(details["original_price"])
        if "category" in details:
            details["category"] = coerce_enum(ProductCategory, details["category"], "category").value
        if "status" in details:
            details["status"] = coerce_enum(ProductStatus, details["status"], "status").value

        for field_name, value in details.items():
            setattr(self, field_name, value)
        self._touch()

        self.raise_(
            ProductDetailsUpdated(
                product_id=self.id,
                name=self.name,
                sku=self.sku,
                barcode=self.barcode,
                price=self.price,
                original_price=self.original_price,
                category=self.category,
                status=self.status,
            )
        )

    def discontinue(self):
        from catalogue.product.events import ProductDiscontinued

        previous = self.status
        self.status = ProductStatus.DISCONTINUED.value
        now = self._touch()
        self.raise_(ProductDiscontinued(product_id=self.id, previous_status=previous, discontinued_at=now))

    # -------------------------------------------------------------------
    # Stock and counters
    # -------------------------------------------------------------------
    def _apply_stock_delta(self, delta, policy):
        """Compute the next stock level under ``policy`` and set it.

        Returns ``(previous, new)``. Must run inside an ``atomic_change`` when
        combined with other field updates.
        """
        from catalogue.product.events import StockBackordered

        previous = self.stock_quantity or 0
        new = previous + delta
        if new < 0:
            if policy == StockPolicy.REJECT:
                raise InvalidStateError(
                    {"stock_quantity": [f"Insufficient stock: {previous} available, {-delta} requested"]}
                )
            if policy == StockPolicy.CLAMP:
                new = 0
            else:
                self.raise_(StockBackordered(product_id=self.id, sku=self.sku, stock_quantity=new))
        self.stock_quantity = new
        return previous, new

    def adjust_stock(self, delta: int, policy: StockPolicy = StockPolicy.ALLOW):
        """Add a signed ``delta`` to the stock level."""
        from catalogue.product.events import StockQuantityUpdated

        previous, new = self._apply_stock_delta(delta, policy)
        self._touch()
        self.raise_(
            StockQuantityUpdated(
                product_id=self.id,
                previous_quantity=previous,
                delta=delta,
                stock_quantity=new,
            )
        )

    def increment_view_count(self):
        self.view_count = (self.view_count or 0) + 1
        self._touch()

    def increment_sold_count(self, quantity: int):
        """Add ``quantity`` to the sold counter. Stock is not touched."""
        from catalogue.product.events import SoldCountIncremented

        _check_quantity(quantity)
        self.sold_count = (self.sold_count or 0) + quantity
        self._touch()
        self.raise_(SoldCountIncremented(product_id=self.id, quantity=quantity, sold_count=self.sold_count))

    def record_sale(self, quantity: int, policy: StockPolicy = StockPolicy.ALLOW, order_id=None):
        """Count ``quantity`` units as sold and take them out of stock together."""
        from catalogue.product.events import SaleRecorded

        _check_quantity(quantity)
        with atomic_change(self):
            _, new = self._apply_stock_delta(-quantity, policy)
            self.sold_count = (self.sold_count or 0) + quantity
        self._touch()
        self.raise_(
            SaleRecorded(
                product_id=self.id,
                order_id=order_id,
                quantity=quantity,
                sold_count=self.sold_count,
                stock_quantity=new,
            )
        )

    # -------------------------------------------------------------------
    # Ratings
    # -------------------------------------------------------------------
    def record_rating(self, rating: int):
        """Fold a 1-5 rating into the running average."""
        from catalogue.product.events import ProductRated

        if rating is None or not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationError({"rating": [f"Rating must be between {MIN_RATING} and {MAX_RATING}"]})

        count = self.rating_count or 0
        total = to_decimal(self.rating_average) * count + Decimal(rating)
        average = round_half_up(total / (count + 1))

        with atomic_change(self):
            self.rating_count = count + 1
            self.rating_average = float(average)
        self._touch()

        self.raise_(
            ProductRated(
                product_id=self.id,
                rating=rating,
                rating_average=self.rating_average,
                rating_count=self.rating_count,
            )
        )

    # -------------------------------------------------------------------
    # Merchandising flags
    # -------------------------------------------------------------------
    def set_featured(self, featured: bool):
        from catalogue.product.events import ProductFeaturedChanged

        self.featured = bool(featured)
        self._touch()
        self.raise_(ProductFeaturedChanged(product_id=self.id, featured=self.featured))

    def set_bestseller(self, bestseller: bool):
        from catalogue.product.events import ProductBestsellerChanged

        self.bestseller = bool(bestseller)
        self._touch()
        self.raise_(ProductBestsellerChanged(product_id=self.id, bestseller=self.bestseller))


def _price(value):
    return float(round_half_up(value)) if value is not None else None


def _check_quantity(quantity):
    if quantity is None or quantity < 1:
        raise ValidationError({"quantity": ["Quantity must be at least 1"]})


"""Repository for the Product aggregate: lookups, listings, rankings and counts.

Listings that the storefront shows to shoppers only include ACTIVE products.
Rankings are sorted in memory with the product id as the final tie-break so
that equal scores come back in the same order every time.
"""

from catalogue.domain import catalogue
from catalogue.product.product import Product, ProductCategory, ProductStatus
from shared.queries import DEFAULT_PAGE_SIZE, coerce_enum, iterate_all, paginate

_ACTIVE = ProductStatus.ACTIVE.value


@catalogue.repository(part_of=Product)
class ProductRepository:
    # -------------------------------------------------------------------
    # Identity lookups
    # -------------------------------------------------------------------
    def find_by_sku(self, sku: str) -> Product | None:
        return self._dao.query.filter(sku=sku).all().first

    def find_by_barcode(self, barcode: str) -> Product | None:
        return self._dao.query.filter(barcode=barcode).all().first

    def exists_by_sku(self, sku: str, exclude_id=None) -> bool:
        return self._exists(sku=sku, exclude_id=exclude_id)

    def exists_by_barcode(self, barcode: str, exclude_id=None) -> bool:
        return self._exists(barcode=barcode, exclude_id=exclude_id)

    def _exists(self, exclude_id=None, **criteria) -> bool:
        matches = self._dao.query.filter(**criteria).all().items
        return any(str(product.id) != str(exclude_id) for product in matches)

    # -------------------------------------------------------------------
    # Listings
    # -------------------------------------------------------------------
    def find_all(self, **page):
        return paginate(self._dao.query, **page)

    def find_active(self, **page):
        return paginate(self._dao.query.filter(status=_ACTIVE), **page)

    def find_by_category(self, category, **page):
        category = coerce_enum(ProductCategory, category, "category")
        return paginate(self._dao.query.filter(category=category.value), **page)

    def find_by_status(self, status, **page):
        status = coerce_enum(ProductStatus, status, "status")
        return paginate(self._dao.query.filter(status=status.value), **page)

    def find_featured(self) -> list[Product]:
        return list(iterate_all(self._dao.query.filter(featured=True, status=_ACTIVE)))

    def find_bestsellers(self) -> list[Product]:
        return list(iterate_all(self._dao.query.filter(bestseller=True, status=_ACTIVE)))

    def find_in_stock(self) -> list[Product]:
        return list(iterate_all(self._dao.query.filter(stock_quantity__gt=0, status=_ACTIVE)))

    def find_by_price_range(self, min_price, max_price) -> list[Product]:
        query = self._dao.query.filter(price__gte=float(min_price), price__lte=float(max_price), status=_ACTIVE)
        return list(iterate_all(query))

    def find_by_rating_range(self, min_rating, max_rating) -> list[Product]:
        query = self._dao.query.filter(
            rating_average__gte=float(min_rating),
            rating_average__lte=float(max_rating),
            status=_ACTIVE,
        )
        return list(iterate_all(query))

    def find_by_brand(self, brand: str) -> list[Product]:
        return list(iterate_all(self._dao.query.filter(brand=brand)))

    def find_by_manufacturer(self, manufacturer: str) -> list[Product]:
        return list(iterate_all(self._dao.query.filter(manufacturer=manufacturer)))

    def search(self, term: str) -> list[Product]:
        """Case-insensitive substring match over name, description and brand.

        Results are not ranked; they come back in creation order.
        """
        needle = term.lower()
        return [
            product
            for product in iterate_all(self._dao.query.filter(status=_ACTIVE).order_by(["created_at", "id"]))
            if any(needle in (value or "").lower() for value in (product.name, product.description, product.brand))
        ]

    # -------------------------------------------------------------------
    # Rankings
    # -------------------------------------------------------------------
    def _ranked(self, key, limit):
        products = sorted(iterate_all(self._dao.query.filter(status=_ACTIVE)), key=key)
        return products[:limit]

    def top_rated(self, limit: int = DEFAULT_PAGE_SIZE) -> list[Product]:
        return self._ranked(lambda p: (-p.rating_average, -p.rating_count, str(p.id)), limit)

    def most_viewed(self, limit: int = DEFAULT_PAGE_SIZE) -> list[Product]:
        return self._ranked(lambda p: (-p.view_count, str(p.id)), limit)

    def best_selling(self, limit: int = DEFAULT_PAGE_SIZE) -> list[Product]:
        return self._ranked(lambda p: (-p.sold_count, str(p.id)), limit)

    # -------------------------------------------------------------------
    # Counts
    # -------------------------------------------------------------------
    def count_by_category(self, category) -> int:
        category = coerce_enum(ProductCategory, category, "category")
        return self._dao.query.filter(category=category.value).all().total

    def count_by_status(self, status) -> int:
        status = coerce_enum(ProductStatus, status, "status")
        return self._dao.query.filter(status=status.value).all().total

    def count_active(self) -> int:
        return self._dao.query.filter(status=_ACTIVE).all().total

    def count_in_stock(self) -> int:
        return self._dao.query.filter(stock_quantity__gt=0, status=_ACTIVE).all().total

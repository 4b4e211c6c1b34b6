"""Domain events for the Product aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from catalogue.domain import catalogue


@catalogue.event(part_of="Product")
class ProductCreated:
    """A new product was added to the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    sku: String()
    category: String(required=True)
    price: Float(required=True)
    stock_quantity: Integer(required=True)
    status: String(required=True)
    created_at: DateTime(required=True)


@catalogue.event(part_of="Product")
class ProductDetailsUpdated:
    """Descriptive fields, identifiers or pricing were overwritten."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    sku: String()
    barcode: String()
    price: Float(required=True)
    original_price: Float()
    category: String(required=True)
    status: String(required=True)


@catalogue.event(part_of="Product")
class ProductDiscontinued:
    """The product was withdrawn from sale. It is never physically removed."""

    __version__ = 1

    product_id: Identifier(required=True)
    previous_status: String(required=True)
    discontinued_at: DateTime(required=True)


@catalogue.event(part_of="Product")
class StockQuantityUpdated:
    __version__ = 1

    product_id: Identifier(required=True)
    previous_quantity: Integer(required=True)
    delta: Integer(required=True)
    stock_quantity: Integer(required=True)


@catalogue.event(part_of="Product")
class StockBackordered:
    """Stock went below zero. More units were committed than were on hand."""

    __version__ = 1

    product_id: Identifier(required=True)
    sku: String()
    stock_quantity: Integer(required=True)


@catalogue.event(part_of="Product")
class SoldCountIncremented:
    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    sold_count: Integer(required=True)


@catalogue.event(part_of="Product")
class SaleRecorded:
    """Units were sold and taken out of stock in a single update."""

    __version__ = 1

    product_id: Identifier(required=True)
    order_id: Identifier()
    quantity: Integer(required=True)
    sold_count: Integer(required=True)
    stock_quantity: Integer(required=True)


@catalogue.event(part_of="Product")
class ProductRated:
    __version__ = 1

    product_id: Identifier(required=True)
    rating: Integer(required=True)
    rating_average: Float(required=True)
    rating_count: Integer(required=True)


@catalogue.event(part_of="Product")
class ProductFeaturedChanged:
    __version__ = 1

    product_id: Identifier(required=True)
    featured: Boolean(default=False)


@catalogue.event(part_of="Product")
class ProductBestsellerChanged:
    __version__ = 1

    product_id: Identifier(required=True)
    bestseller: Boolean(default=False)

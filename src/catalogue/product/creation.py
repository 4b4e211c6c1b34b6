"""Product creation — command and handler.

SKU and barcode are optional but unique across the catalogue. Duplicates are
rejected with a ``ConflictError`` before anything is written.
"""

from protean import handle
from protean.fields import Boolean, Float, Integer, String
from protean.utils.globals import current_domain

from catalogue.domain import catalogue, logger
from catalogue.product.product import Product, ProductCategory, ProductStatus
from shared.exceptions import ConflictError


def ensure_unique_identifiers(repo, sku=None, barcode=None, exclude_id=None):
    """Raise ``ConflictError`` if another product already uses ``sku`` or ``barcode``."""
    errors = {}
    if sku and repo.exists_by_sku(sku, exclude_id=exclude_id):
        errors["sku"] = [f"Product with SKU '{sku}' already exists"]
    if barcode and repo.exists_by_barcode(barcode, exclude_id=exclude_id):
        errors["barcode"] = [f"Product with barcode '{barcode}' already exists"]
    if errors:
        raise ConflictError(errors)


@catalogue.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=255)
    description: String(max_length=1000)
    price: Float(required=True, min_value=0.0)
    original_price: Float(min_value=0.0)
    stock_quantity: Integer(default=0)
    sku: String(max_length=50)
    barcode: String(max_length=50)
    weight_kg: Float(min_value=0.0)
    dimensions_cm: String(max_length=50)
    status: String(max_length=20, choices=ProductStatus)
    category: String(required=True, max_length=20, choices=ProductCategory)
    brand: String(max_length=100)
    model: String(max_length=100)
    manufacturer: String(max_length=100)
    warranty_months: Integer(min_value=0)
    featured: Boolean(default=False)
    bestseller: Boolean(default=False)


@catalogue.command_handler(part_of=Product)
class CreateProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        repo = current_domain.repository_for(Product)
        ensure_unique_identifiers(repo, sku=command.sku, barcode=command.barcode)

        product = Product.create(
            name=command.name,
            description=command.description,
            price=command.price,
            original_price=command.original_price,
            stock_quantity=command.stock_quantity,
            sku=command.sku,
            barcode=command.barcode,
            weight_kg=command.weight_kg,
            dimensions_cm=command.dimensions_cm,
            status=command.status,
            category=command.category,
            brand=command.brand,
            model=command.model,
            manufacturer=command.manufacturer,
            warranty_months=command.warranty_months,
            featured=command.featured,
            bestseller=command.bestseller,
        )
        repo.add(product)

        logger.info("Product created", product_id=str(product.id), sku=product.sku, category=product.category)
        return str(product.id)

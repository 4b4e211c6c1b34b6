"""Product details management — command and handler."""

from protean import handle
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from catalogue.domain import catalogue, logger
from catalogue.product.creation import ensure_unique_identifiers
from catalogue.product.product import Product, ProductCategory, ProductStatus


@catalogue.command(part_of="Product")
class UpdateProduct:
    product_id: Identifier(required=True)
    name: String(max_length=255)
    description: String(max_length=1000)
    price: Float(min_value=0.0)
    original_price: Float(min_value=0.0)
    sku: String(max_length=50)
    barcode: String(max_length=50)
    weight_kg: Float(min_value=0.0)
    dimensions_cm: String(max_length=50)
    status: String(max_length=20, choices=ProductStatus)
    category: String(max_length=20, choices=ProductCategory)
    brand: String(max_length=100)
    model: String(max_length=100)
    manufacturer: String(max_length=100)
    warranty_months: Integer(min_value=0)


@catalogue.command_handler(part_of=Product)
class ManageProductDetailsHandler:
    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        ensure_unique_identifiers(repo, sku=command.sku, barcode=command.barcode, exclude_id=product.id)

        product.update_details(
            name=command.name,
            description=command.description,
            price=command.price,
            original_price=command.original_price,
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
        )
        repo.add(product)

        logger.info("Product updated", product_id=str(product.id))

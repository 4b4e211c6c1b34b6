"""View and sold counters — commands and handler."""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product


@catalogue.command(part_of="Product")
class IncrementViewCount:
    product_id: Identifier(required=True)


@catalogue.command(part_of="Product")
class IncrementSoldCount:
    """Add to the sold counter only. Use ``RecordSale`` to also take stock out."""

    product_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=1)


@catalogue.command_handler(part_of=Product)
class ProductMetricsHandler:
    @handle(IncrementViewCount)
    def increment_view_count(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.increment_view_count()
        repo.add(product)

    @handle(IncrementSoldCount)
    def increment_sold_count(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.increment_sold_count(command.quantity)
        repo.add(product)

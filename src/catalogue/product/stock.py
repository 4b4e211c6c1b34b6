"""Stock adjustments and sales — commands and handler.

What happens when stock would drop below zero is decided by the configured
``StockPolicy``. The default allows negative stock and raises
``StockBackordered`` so the shortfall is visible.
"""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from catalogue.domain import catalogue, logger
from catalogue.product.product import Product, stock_policy


@catalogue.command(part_of="Product")
class UpdateStockQuantity:
    product_id: Identifier(required=True)
    quantity: Integer(required=True)  # signed delta


@catalogue.command(part_of="Product")
class RecordSale:
    """Increment the sold count and decrement stock in one write."""

    product_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=1)
    order_id: Identifier()


@catalogue.command_handler(part_of=Product)
class StockHandler:
    @handle(UpdateStockQuantity)
    def update_stock_quantity(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.adjust_stock(command.quantity, policy=stock_policy())
        repo.add(product)

        logger.info(
            "Stock quantity updated",
            product_id=str(product.id),
            delta=command.quantity,
            stock_quantity=product.stock_quantity,
        )

    @handle(RecordSale)
    def record_sale(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.record_sale(command.quantity, policy=stock_policy(), order_id=command.order_id)
        repo.add(product)

        logger.info(
            "Sale recorded",
            product_id=str(product.id),
            order_id=command.order_id,
            quantity=command.quantity,
            stock_quantity=product.stock_quantity,
        )

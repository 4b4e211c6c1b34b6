"""Inbound cross-domain event handler — Catalogue reacts to Ordering events.

Listens for OrderShipped from the Ordering domain and records a sale for each
shipped line item: the sold count goes up and stock goes down in the same
write.

Every line is applied in memory before anything is persisted, so an unknown
product or a rejected stock check leaves the whole shipment unrecorded.

Cross-domain events are imported from shared.events.ordering and registered
as external events via catalogue.register_external_event().
"""

import json

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from shared.events.ordering import OrderShipped
from shared.logging import add_context, clear_context

from catalogue.domain import catalogue
from catalogue.product.product import Product, stock_policy

logger = structlog.get_logger(__name__)

# Register external events so Protean can deserialize them
catalogue.register_external_event(OrderShipped, "Ordering.OrderShipped.v1")


@catalogue.event_handler(part_of=Product, stream_category="ordering::order")
class OrderingCatalogueEventHandler:
    """Reacts to Ordering domain events to keep product sales figures current."""

    @handle(OrderShipped)
    def on_order_shipped(self, event: OrderShipped) -> None:
        items = json.loads(event.items) if isinstance(event.items, str) else event.items
        logger.info(
            "Recording sales for shipped order",
            order_id=str(event.order_id),
            item_count=len(items),
        )

        add_context(order_id=str(event.order_id))
        try:
            repo = current_domain.repository_for(Product)
            policy = stock_policy()

            # Lines for the same product accumulate on one loaded instance
            products = {}
            for item in items:
                product_id = str(item["product_id"])
                if product_id not in products:
                    products[product_id] = repo.get(product_id)
                products[product_id].record_sale(int(item["quantity"]), policy=policy, order_id=str(event.order_id))

            for product in products.values():
                repo.add(product)
                logger.info(
                    "Sale recorded",
                    product_id=str(product.id),
                    sold_count=product.sold_count,
                    stock_quantity=product.stock_quantity,
                )
        finally:
            clear_context()

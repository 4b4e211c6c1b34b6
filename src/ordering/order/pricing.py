"""Order amounts and details — commands and handler.

``CalculateOrderTotal`` re-derives the total from the stored components and
returns it; issuing it twice in a row yields the same value. ``UpdateOrder``
overwrites any of the monetary inputs and shipping details, and the total is
always recomputed from the result. Owner and order number never change.
"""

from protean import handle
from protean.fields import DateTime, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.domain import logger, ordering
from ordering.order.order import Order, ShippingMethod


@ordering.command(part_of="Order")
class CalculateOrderTotal:
    order_id = Identifier(required=True)


@ordering.command(part_of="Order")
class UpdateOrder:
    order_id = Identifier(required=True)
    subtotal = Float()
    tax_amount = Float()
    shipping_cost = Float()
    discount_amount = Float()
    shipping_method = String(max_length=20, choices=ShippingMethod)
    tracking_number = String(max_length=100)
    estimated_delivery = DateTime()
    notes = Text()


@ordering.command_handler(part_of=Order)
class PricingHandler:
    @handle(CalculateOrderTotal)
    def calculate_order_total(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        total = order.recalculate_total()
        repo.add(order)

        logger.debug("Order total calculated", order_id=str(order.id), total_amount=str(total))
        return float(total)

    @handle(UpdateOrder)
    def update_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        order.update_amounts(
            subtotal=command.subtotal,
            tax_amount=command.tax_amount,
            shipping_cost=command.shipping_cost,
            discount_amount=command.discount_amount,
        )
        if any(
            value is not None
            for value in (
                command.shipping_method,
                command.tracking_number,
                command.estimated_delivery,
                command.notes,
            )
        ):
            order.update_details(
                shipping_method=command.shipping_method,
                tracking_number=command.tracking_number,
                estimated_delivery=command.estimated_delivery,
                notes=command.notes,
            )
        repo.add(order)

        logger.info("Order updated", order_id=str(order.id), total_amount=order.total_amount)
        return str(order.id)

"""Order fulfillment — commands and handler.

Shipping and delivery overwrite the status regardless of where the order
currently is. Shipping raises ``OrderShipped``, which the catalogue consumes
to record sales.
"""

from protean import handle
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import logger, ordering
from ordering.order.order import Order, ShippingMethod


@ordering.command(part_of="Order")
class ShipOrder:
    """Record that the order has been handed to a carrier."""

    order_id = Identifier(required=True)
    tracking_number = String(required=True, max_length=100)
    shipping_method = String(required=True, max_length=20, choices=ShippingMethod)


@ordering.command(part_of="Order")
class DeliverOrder:
    """Record that the carrier has delivered the order."""

    order_id = Identifier(required=True)


@ordering.command(part_of="Order")
class UpdateTrackingNumber:
    order_id = Identifier(required=True)
    tracking_number = String(required=True, max_length=100)


@ordering.command(part_of="Order")
class UpdateEstimatedDelivery:
    order_id = Identifier(required=True)
    estimated_delivery = DateTime(required=True)


@ordering.command_handler(part_of=Order)
class FulfillmentHandler:
    @handle(ShipOrder)
    def ship_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.ship(
            tracking_number=command.tracking_number,
            shipping_method=command.shipping_method,
        )
        repo.add(order)

        logger.info(
            "Order shipped",
            order_id=str(order.id),
            tracking_number=command.tracking_number,
            shipping_method=order.shipping_method,
        )

    @handle(DeliverOrder)
    def deliver_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.deliver()
        repo.add(order)

        logger.info("Order delivered", order_id=str(order.id))

    @handle(UpdateTrackingNumber)
    def update_tracking_number(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.update_details(tracking_number=command.tracking_number)
        repo.add(order)

    @handle(UpdateEstimatedDelivery)
    def update_estimated_delivery(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.update_details(estimated_delivery=command.estimated_delivery)
        repo.add(order)

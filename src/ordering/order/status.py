"""Direct status overwrites — commands and handler.

Both axes are checked against the transition policy configured for the
domain (permissive unless ``domain.toml`` selects ``strict``).
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import logger, ordering
from ordering.order.order import Order, OrderStatus, PaymentStatus
from ordering.order.policies import order_status_policy, payment_status_policy


@ordering.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20, choices=OrderStatus)


@ordering.command(part_of="Order")
class UpdatePaymentStatus:
    order_id = Identifier(required=True)
    payment_status = String(required=True, max_length=20, choices=PaymentStatus)


@ordering.command_handler(part_of=Order)
class UpdateStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous = order.status
        order.update_status(command.status, policy=order_status_policy())
        repo.add(order)

        logger.info(
            "Order status updated",
            order_id=str(order.id),
            previous_status=previous,
            new_status=order.status,
        )

    @handle(UpdatePaymentStatus)
    def update_payment_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous = order.payment_status
        order.update_payment_status(command.payment_status, policy=payment_status_policy())
        repo.add(order)

        logger.info(
            "Payment status updated",
            order_id=str(order.id),
            previous_status=previous,
            new_status=order.payment_status,
        )

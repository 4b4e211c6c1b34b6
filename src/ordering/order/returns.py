"""Order returns — command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import logger, ordering
from ordering.order.order import Order


@ordering.command(part_of="Order")
class ReturnOrder:
    """Record a customer return. The order ends up Refunded."""

    order_id = Identifier(required=True)
    reason = String(max_length=500)


@ordering.command_handler(part_of=Order)
class ReturnOrderHandler:
    @handle(ReturnOrder)
    def return_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.return_order(reason=command.reason)
        repo.add(order)

        logger.info("Order returned", order_id=str(order.id), reason=command.reason)

"""Order payment and refund — commands and handler.

Payment is recorded as a status change only; no gateway is involved. The
refund amount travels on the event and is not reconciled against the total.
"""

from protean import handle
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import logger, ordering
from ordering.order.order import Order


@ordering.command(part_of="Order")
class ProcessPayment:
    order_id = Identifier(required=True)
    payment_method = String(max_length=50)


@ordering.command(part_of="Order")
class RefundOrder:
    order_id = Identifier(required=True)
    amount = Float(min_value=0.0)
    reason = String(max_length=500)


@ordering.command_handler(part_of=Order)
class PaymentHandler:
    @handle(ProcessPayment)
    def process_payment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.process_payment(payment_method=command.payment_method)
        repo.add(order)

        logger.info("Payment processed", order_id=str(order.id), payment_method=command.payment_method)

    @handle(RefundOrder)
    def refund_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.refund(amount=command.amount, reason=command.reason)
        repo.add(order)

        logger.info(
            "Order refunded",
            order_id=str(order.id),
            refund_amount=command.amount,
            total_amount=order.total_amount,
        )

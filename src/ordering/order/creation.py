"""Order creation — command and handler."""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.domain import logger, ordering
from ordering.order.order import Order, ShippingMethod


@ordering.command(part_of="Order")
class CreateOrder:
    user_id = Identifier(required=True)
    items = Text()  # JSON: list of {"product_id", "quantity", "unit_price", "discount_percentage"}
    subtotal = Float()
    tax_amount = Float()
    shipping_cost = Float()
    discount_amount = Float()
    shipping_method = String(max_length=20, choices=ShippingMethod)
    notes = Text()


@ordering.command_handler(part_of=Order)
class CreateOrderHandler:
    @handle(CreateOrder)
    def create_order(self, command):
        items_data = _parse_items(command.items)

        order = Order.create(
            user_id=command.user_id,
            items_data=items_data,
            subtotal=command.subtotal,
            tax_amount=command.tax_amount,
            shipping_cost=command.shipping_cost,
            discount_amount=command.discount_amount,
            shipping_method=command.shipping_method,
            notes=command.notes,
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order created",
            order_id=str(order.id),
            order_number=order.order_number,
            total_amount=order.total_amount,
        )
        return str(order.id)


def _parse_items(raw):
    """Decode the JSON item list carried by ``CreateOrder``."""
    if not raw:
        return []
    try:
        items = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError({"items": [f"Items must be a JSON list: {exc.msg}"]}) from exc
    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        raise ValidationError({"items": ["Items must be a JSON list of objects"]})
    return items

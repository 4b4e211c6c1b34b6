"""Domain events for the Order aggregate.

Events are versioned, immutable facts raised by the aggregate and dispatched
when the aggregate is persisted. ``OrderShipped`` is also the cross-domain
signal the catalogue uses to record sales.
"""

from protean.fields import DateTime, Float, Identifier, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderCreated:
    """A new order was placed with status Pending and payment Pending."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    user_id = Identifier(required=True)
    items = Text()  # JSON: list of item dicts
    subtotal = Float(required=True)
    tax_amount = Float(required=True)
    shipping_cost = Float(required=True)
    discount_amount = Float(required=True)
    total_amount = Float(required=True)
    created_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """The fulfillment status was overwritten through a direct status update."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class PaymentStatusChanged:
    """The payment status was overwritten through a direct status update."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderAmountsUpdated:
    """One or more monetary inputs changed and the total was recomputed."""

    __version__ = 1

    order_id = Identifier(required=True)
    subtotal = Float(required=True)
    tax_amount = Float(required=True)
    shipping_cost = Float(required=True)
    discount_amount = Float(required=True)
    total_amount = Float(required=True)


@ordering.event(part_of="Order")
class OrderTotalRecalculated:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_total = Float(required=True)
    total_amount = Float(required=True)


@ordering.event(part_of="Order")
class OrderDetailsUpdated:
    """Shipping method, tracking number, estimated delivery or notes changed."""

    __version__ = 1

    order_id = Identifier(required=True)
    shipping_method = String()
    tracking_number = String()
    estimated_delivery = DateTime()


@ordering.event(part_of="Order")
class OrderCancelled:
    """A Pending or Processing order was cancelled by request."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    reason = String()
    cancelled_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderDeleted:
    """An order was removed from circulation (soft delete to Cancelled)."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    deleted_at = DateTime(required=True)


@ordering.event(part_of="Order")
class PaymentProcessed:
    """Payment was recorded as Paid. The method is carried here only."""

    __version__ = 1

    order_id = Identifier(required=True)
    payment_method = String()
    amount = Float(required=True)
    processed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderShipped:
    """The order was handed to a carrier.

    Carries the line items so the catalogue can record the sale against each
    product.
    """

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    tracking_number = String(required=True)
    shipping_method = String(required=True)
    items = Text(required=True)  # JSON: list of {"product_id", "quantity"}
    shipped_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderDelivered:
    __version__ = 1

    order_id = Identifier(required=True)
    delivered_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderReturned:
    """The customer returned the order; status moves to Refunded."""

    __version__ = 1

    order_id = Identifier(required=True)
    reason = String()
    returned_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderRefunded:
    """Payment was refunded. The amount is informational and not reconciled."""

    __version__ = 1

    order_id = Identifier(required=True)
    refund_amount = Float()
    reason = String()
    refunded_at = DateTime(required=True)

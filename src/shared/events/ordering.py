"""Cross-domain event contracts for Ordering domain events.

These classes define the event shape for consumption by other domains (the
Catalogue records a sale per shipped line item). They are registered as
external events via domain.register_external_event() with matching __type__
strings so Protean's stream deserialization works correctly.

The source-of-truth events are in src/ordering/order/events.py.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Identifier, String, Text


class OrderShipped(BaseEvent):
    """An order was handed to a carrier.

    Consumed by the Catalogue domain to increment sold counts and decrement
    stock for each line item.
    """

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    tracking_number = String()
    shipping_method = String()
    items = Text(required=True)  # JSON list of {"product_id", "quantity"}
    shipped_at = DateTime(required=True)

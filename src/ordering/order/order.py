"""Order aggregate: the core of the ordering domain.

Two independent status axes are tracked on every order:

    Fulfillment:  PENDING → PROCESSING → SHIPPED → DELIVERED
                  CANCELLED (from PENDING, PROCESSING), REFUNDED
    Payment:      PENDING → PAID → REFUNDED, or PENDING → FAILED

Named operations (cancel, ship, deliver, ...) apply their own preconditions.
Direct status overwrites go through a ``TransitionPolicy`` (see
``ordering.order.policies``).

Money is stored as floats rounded to cents. All arithmetic happens in
``Decimal`` via ``shared.money``; the total is never accepted from outside.
"""

import json
from datetime import UTC, datetime
from decimal import InvalidOperation
from enum import Enum
from uuid import uuid4

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
)

from ordering.domain import ordering
from ordering.order.events import (
    OrderAmountsUpdated,
    OrderCancelled,
    OrderCreated,
    OrderDeleted,
    OrderDelivered,
    OrderDetailsUpdated,
    OrderRefunded,
    OrderReturned,
    OrderShipped,
    OrderStatusChanged,
    OrderTotalRecalculated,
    PaymentProcessed,
    PaymentStatusChanged,
)
from shared.exceptions import InvalidStateError
from shared.money import as_amount, line_total, order_total, round_half_up, to_decimal
from shared.queries import coerce_enum


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    REFUNDED = "Refunded"


class PaymentStatus(Enum):
    PENDING = "Pending"
    PAID = "Paid"
    FAILED = "Failed"
    REFUNDED = "Refunded"


class ShippingMethod(Enum):
    STANDARD = "Standard"
    EXPRESS = "Express"
    OVERNIGHT = "Overnight"
    PICKUP = "Pickup"


# States from which cancellation is allowed
_CANCELLABLE_STATES = {
    OrderStatus.PENDING,
    OrderStatus.PROCESSING,
}

_AMOUNT_FIELDS = ("subtotal", "tax_amount", "shipping_cost", "discount_amount")


def generate_order_number(now=None):
    now = now or datetime.now(UTC)
    return f"ORD-{now:%Y%m%d}-{uuid4().hex[:8].upper()}"


def _validated_amounts(amounts):
    """Replace missing amounts with zero and reject negatives."""
    normalized = {}
    errors = {}
    for field_name in _AMOUNT_FIELDS:
        value = to_decimal(amounts.get(field_name))
        if value < 0:
            errors[field_name] = [f"{field_name} cannot be negative"]
        normalized[field_name] = round_half_up(value)
    if errors:
        raise ValidationError(errors)
    return normalized


def _build_item(item_data):
    """Build an ``OrderItem`` from a raw dict, reporting malformed input as a ValidationError."""
    try:
        return OrderItem.build(**item_data)
    except (TypeError, InvalidOperation) as exc:
        raise ValidationError({"items": [f"Malformed order item {item_data!r}"]}) from exc


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """One product line within an order.

    ``total_price`` is derived from quantity, unit price and discount
    percentage and is fixed when the item is built.
    """

    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    discount_percentage = Float(default=0.0, min_value=0.0, max_value=100.0)
    total_price = Float(default=0.0, min_value=0.0)

    @classmethod
    def build(cls, product_id, quantity, unit_price, discount_percentage=None, **kwargs):
        discount_percentage = discount_percentage or 0.0
        unit_price = round_half_up(unit_price)
        return cls(
            product_id=product_id,
            quantity=quantity,
            unit_price=float(unit_price),
            discount_percentage=float(discount_percentage),
            total_price=float(line_total(unit_price, quantity, discount_percentage)),
            **kwargs,
        )

    @property
    def discount_amount(self):
        gross = to_decimal(self.unit_price) * self.quantity
        return gross - to_decimal(self.total_price)

    def has_discount(self):
        return bool(self.discount_percentage) and self.discount_percentage > 0

    @invariant.post
    def total_price_must_match_line(self):
        if self.unit_price is None or self.quantity is None:
            return
        expected = line_total(self.unit_price, self.quantity, self.discount_percentage)
        if to_decimal(self.total_price) != expected:
            raise ValidationError({"total_price": [f"Line total must be {expected}, got {self.total_price}"]})


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    order_number = String(required=True, max_length=100)
    user_id = Identifier(required=True)
    items = HasMany(OrderItem)
    subtotal = Float(default=0.0, min_value=0.0)
    tax_amount = Float(default=0.0, min_value=0.0)
    shipping_cost = Float(default=0.0, min_value=0.0)
    discount_amount = Float(default=0.0, min_value=0.0)
    total_amount = Float(default=0.0, min_value=0.0)
    status = String(
        max_length=20,
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    payment_status = String(
        max_length=20,
        choices=PaymentStatus,
        default=PaymentStatus.PENDING.value,
    )
    shipping_method = String(max_length=20, choices=ShippingMethod)
    tracking_number = String(max_length=100)
    estimated_delivery = DateTime()
    notes = Text()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_amount_must_match_components(self):
        expected = order_total(self.subtotal, self.tax_amount, self.shipping_cost, self.discount_amount)
        if to_decimal(self.total_amount) != expected:
            raise ValidationError(
                {"total_amount": [f"Total must equal subtotal + tax + shipping - discount ({expected})"]}
            )

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id, items_data=None, shipping_method=None, notes=None, **amounts):
        """Create a new Pending order.

        Args:
            user_id: The owning user; fixed for the life of the order.
            items_data: List of dicts with product_id, quantity, unit_price
                and optional discount_percentage.
            shipping_method: Optional ``ShippingMethod`` member, value or name.
            notes: Free text.
            **amounts: subtotal, tax_amount, shipping_cost, discount_amount.
                Missing values default to zero.
        """
        normalized = _validated_amounts(amounts)
        total = order_total(**normalized)
        if total < 0:
            raise ValidationError({"total_amount": ["Discount cannot exceed subtotal, tax and shipping combined"]})

        method = coerce_enum(ShippingMethod, shipping_method, "shipping_method").value if shipping_method else None
        items = [_build_item(item) for item in (items_data or [])]
        now = datetime.now(UTC)

        order = cls(
            order_number=generate_order_number(now),
            user_id=user_id,
            items=items,
            subtotal=float(normalized["subtotal"]),
            tax_amount=float(normalized["tax_amount"]),
            shipping_cost=float(normalized["shipping_cost"]),
            discount_amount=float(normalized["discount_amount"]),
            total_amount=float(total),
            shipping_method=method,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderCreated(
                order_id=str(order.id),
                order_number=order.order_number,
                user_id=str(user_id),
                items=json.dumps(order._items_payload(include_prices=True)),
                subtotal=order.subtotal,
                tax_amount=order.tax_amount,
                shipping_cost=order.shipping_cost,
                discount_amount=order.discount_amount,
                total_amount=order.total_amount,
                created_at=now,
            )
        )
        return order

    def _items_payload(self, include_prices=False):
        payload = []
        for item in self.items or []:
            entry = {"product_id": str(item.product_id), "quantity": item.quantity}
            if include_prices:
                entry.update(
                    unit_price=item.unit_price,
                    discount_percentage=item.discount_percentage,
                    total_price=item.total_price,
                )
            payload.append(entry)
        return payload

    def _touch(self):
        now = datetime.now(UTC)
        self.updated_at = now
        return now

    # -------------------------------------------------------------------
    # Predicates
    # -------------------------------------------------------------------
    def can_be_cancelled(self):
        return OrderStatus(self.status) in _CANCELLABLE_STATES

    def can_be_returned(self):
        return OrderStatus(self.status) == OrderStatus.DELIVERED

    @property
    def items_total(self):
        """Sum of line totals; informational, not tied to ``subtotal``."""
        return sum((to_decimal(item.total_price) for item in self.items or []), to_decimal(0))

    # -------------------------------------------------------------------
    # Amounts
    # -------------------------------------------------------------------
    def update_amounts(self, **amounts):
        """Overwrite any of the monetary inputs and recompute the total."""
        current = {field_name: getattr(self, field_name) for field_name in _AMOUNT_FIELDS}
        current.update({k: v for k, v in amounts.items() if v is not None})
        normalized = _validated_amounts(current)
        total = order_total(**normalized)
        if total < 0:
            raise ValidationError({"total_amount": ["Discount cannot exceed subtotal, tax and shipping combined"]})

        with atomic_change(self):
            for field_name, value in normalized.items():
                setattr(self, field_name, float(value))
            self.total_amount = float(total)
        self._touch()

        self.raise_(
            OrderAmountsUpdated(
                order_id=str(self.id),
                subtotal=self.subtotal,
                tax_amount=self.tax_amount,
                shipping_cost=self.shipping_cost,
                discount_amount=self.discount_amount,
                total_amount=self.total_amount,
            )
        )

    def recalculate_total(self):
        """Recompute ``total_amount`` from its components and return it.

        Running it again without changes yields the same value.
        """
        previous = self.total_amount
        total = order_total(self.subtotal, self.tax_amount, self.shipping_cost, self.discount_amount)
        if to_decimal(previous) != total:
            with atomic_change(self):
                self.total_amount = float(total)
            self._touch()
            self.raise_(
                OrderTotalRecalculated(
                    order_id=str(self.id),
                    previous_total=previous or 0.0,
                    total_amount=self.total_amount,
                )
            )
        return total

    # -------------------------------------------------------------------
    # Details
    # -------------------------------------------------------------------
    def update_details(self, shipping_method=None, tracking_number=None, estimated_delivery=None, notes=None):
        """Overwrite shipping and bookkeeping details. ``None`` leaves a field unchanged."""
        if shipping_method is not None:
            self.shipping_method = coerce_enum(ShippingMethod, shipping_method, "shipping_method").value
        if tracking_number is not None:
            self.tracking_number = tracking_number
        if estimated_delivery is not None:
            self.estimated_delivery = estimated_delivery
        if notes is not None:
            self.notes = notes
        self._touch()

        self.raise_(
            OrderDetailsUpdated(
                order_id=str(self.id),
                shipping_method=self.shipping_method,
                tracking_number=self.tracking_number,
                estimated_delivery=self.estimated_delivery,
            )
        )

    # -------------------------------------------------------------------
    # Direct status overwrites
    # -------------------------------------------------------------------
    def update_status(self, new_status, policy=None):
        from ordering.order.policies import PERMISSIVE_ORDER_STATUS

        policy = policy or PERMISSIVE_ORDER_STATUS
        current = OrderStatus(self.status)
        target = coerce_enum(OrderStatus, new_status, "status")
        policy.check(current, target)

        self.status = target.value
        now = self._touch()
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )

    def update_payment_status(self, new_status, policy=None):
        from ordering.order.policies import PERMISSIVE_PAYMENT_STATUS

        policy = policy or PERMISSIVE_PAYMENT_STATUS
        current = PaymentStatus(self.payment_status)
        target = coerce_enum(PaymentStatus, new_status, "payment_status")
        policy.check(current, target)

        self.payment_status = target.value
        now = self._touch()
        self.raise_(
            PaymentStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Lifecycle operations
    # -------------------------------------------------------------------
    def cancel(self, reason):
        """Cancel a Pending or Processing order. The reason replaces any notes."""
        current = OrderStatus(self.status)
        if current not in _CANCELLABLE_STATES:
            raise InvalidStateError(
                {
                    "status": [
                        f"Cannot cancel order in {current.value} state. "
                        f"Cancellation is only allowed from: "
                        f"{', '.join(sorted(s.value for s in _CANCELLABLE_STATES))}"
                    ]
                }
            )

        self.status = OrderStatus.CANCELLED.value
        self.notes = reason
        now = self._touch()
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                previous_status=current.value,
                reason=reason,
                cancelled_at=now,
            )
        )

    def delete(self):
        """Soft-delete: move to Cancelled from any status, notes untouched."""
        previous = self.status
        self.status = OrderStatus.CANCELLED.value
        now = self._touch()
        self.raise_(
            OrderDeleted(
                order_id=str(self.id),
                previous_status=previous,
                deleted_at=now,
            )
        )

    def process_payment(self, payment_method):
        """Mark payment as Paid. The method is not stored on the order."""
        self.payment_status = PaymentStatus.PAID.value
        now = self._touch()
        self.raise_(
            PaymentProcessed(
                order_id=str(self.id),
                payment_method=payment_method,
                amount=self.total_amount,
                processed_at=now,
            )
        )

    def ship(self, tracking_number, shipping_method):
        """Mark the order Shipped and record how it travels, whatever its status."""
        method = coerce_enum(ShippingMethod, shipping_method, "shipping_method")
        self.status = OrderStatus.SHIPPED.value
        self.tracking_number = tracking_number
        self.shipping_method = method.value
        now = self._touch()
        self.raise_(
            OrderShipped(
                order_id=str(self.id),
                order_number=self.order_number,
                tracking_number=tracking_number,
                shipping_method=method.value,
                items=json.dumps(self._items_payload()),
                shipped_at=now,
            )
        )

    def deliver(self):
        self.status = OrderStatus.DELIVERED.value
        now = self._touch()
        self.raise_(OrderDelivered(order_id=str(self.id), delivered_at=now))

    def return_order(self, reason):
        """Record a return: status becomes Refunded and the reason replaces notes."""
        self.status = OrderStatus.REFUNDED.value
        self.notes = reason
        now = self._touch()
        self.raise_(OrderReturned(order_id=str(self.id), reason=reason, returned_at=now))

    def refund(self, amount, reason):
        """Mark payment Refunded. ``amount`` is not reconciled against the total."""
        self.payment_status = PaymentStatus.REFUNDED.value
        self.notes = reason
        now = self._touch()
        self.raise_(
            OrderRefunded(
                order_id=str(self.id),
                refund_amount=as_amount(amount) if amount is not None else None,
                reason=reason,
                refunded_at=now,
            )
        )

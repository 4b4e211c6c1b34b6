"""Read-only order queries: predicates, revenue and statistics.

These never mutate state and are called directly rather than through
``domain.process``.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from protean.utils.globals import current_domain

from ordering.order.order import Order, OrderStatus
from shared.money import ZERO, round_half_up, to_decimal
from shared.queries import iterate_all


@dataclass(frozen=True)
class OrderStatistics:
    """Aggregate figures over orders created within a date range.

    ``total_items_sold`` is not computed yet and is always zero.
    """

    start: datetime
    end: datetime
    total_orders: int = 0
    counts_by_status: dict[str, int] = field(default_factory=dict)
    total_revenue: Decimal = ZERO
    average_order_value: Decimal = ZERO
    total_items_sold: int = 0

    def to_dict(self) -> dict:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "total_orders": self.total_orders,
            "counts_by_status": dict(self.counts_by_status),
            "total_revenue": float(self.total_revenue),
            "average_order_value": float(self.average_order_value),
            "total_items_sold": self.total_items_sold,
        }


def _repository():
    return current_domain.repository_for(Order)


def can_be_cancelled(order_id) -> bool:
    return _repository().get(order_id).can_be_cancelled()


def can_be_returned(order_id) -> bool:
    return _repository().get(order_id).can_be_returned()


def _orders_created_between(start, end) -> list[Order]:
    return list(iterate_all(_repository().created_between(start, end)))


def _revenue(orders) -> Decimal:
    return round_half_up(sum((to_decimal(order.total_amount) for order in orders), ZERO))


def _average(revenue: Decimal, count: int) -> Decimal:
    if count == 0:
        return ZERO
    return round_half_up(revenue / count)


def total_revenue(start, end) -> Decimal:
    """Sum of ``total_amount`` over orders created in ``[start, end]``."""
    return _revenue(_orders_created_between(start, end))


def average_order_value(start, end) -> Decimal:
    orders = _orders_created_between(start, end)
    return _average(_revenue(orders), len(orders))


def get_order_statistics(start, end) -> OrderStatistics:
    orders = _orders_created_between(start, end)

    counts = {status.value: 0 for status in OrderStatus}
    for order in orders:
        counts[order.status] += 1

    revenue = _revenue(orders)
    return OrderStatistics(
        start=start,
        end=end,
        total_orders=len(orders),
        counts_by_status=counts,
        total_revenue=revenue,
        average_order_value=_average(revenue, len(orders)),
    )

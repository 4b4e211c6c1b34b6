"""Repository for the Order aggregate with the listing and range queries."""

from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus, PaymentStatus, ShippingMethod
from shared.queries import coerce_enum, iterate_all, paginate


@ordering.repository(part_of=Order)
class OrderRepository:
    def find_by_order_number(self, order_number: str) -> Order | None:
        return self._dao.query.filter(order_number=order_number).all().first

    def find_by_user(self, user_id, **page):
        return paginate(self._dao.query.filter(user_id=str(user_id)), **page)

    def find_by_status(self, status, **page):
        status = coerce_enum(OrderStatus, status, "status")
        return paginate(self._dao.query.filter(status=status.value), **page)

    def find_by_payment_status(self, payment_status, **page):
        payment_status = coerce_enum(PaymentStatus, payment_status, "payment_status")
        return paginate(self._dao.query.filter(payment_status=payment_status.value), **page)

    def find_by_shipping_method(self, shipping_method, **page):
        method = coerce_enum(ShippingMethod, shipping_method, "shipping_method")
        return paginate(self._dao.query.filter(shipping_method=method.value), **page)

    def created_between(self, start, end):
        return self._dao.query.filter(created_at__gte=start, created_at__lte=end)

    def find_by_date_range(self, start, end, **page):
        return paginate(self.created_between(start, end), **page)

    def find_by_amount_range(self, min_amount, max_amount, **page):
        query = self._dao.query.filter(total_amount__gte=float(min_amount), total_amount__lte=float(max_amount))
        return paginate(query, **page)

    def search_by_tracking_number(self, fragment: str) -> list[Order]:
        """Case-insensitive substring match; orders without a tracking number are skipped."""
        needle = fragment.lower()
        return [
            order
            for order in iterate_all(self._dao.query.order_by(["created_at", "id"]))
            if order.tracking_number and needle in order.tracking_number.lower()
        ]

    def needing_attention(self) -> list[Order]:
        """Orders still Pending/Processing, or whose payment is still Pending."""
        open_statuses = [OrderStatus.PENDING.value, OrderStatus.PROCESSING.value]
        by_status = iterate_all(self._dao.query.filter(status__in=open_statuses))
        by_payment = iterate_all(self._dao.query.filter(payment_status=PaymentStatus.PENDING.value))

        seen = {}
        for order in [*by_status, *by_payment]:
            seen.setdefault(str(order.id), order)
        return sorted(seen.values(), key=lambda o: (o.created_at, str(o.id)))

    def count_by_status(self, status) -> int:
        status = coerce_enum(OrderStatus, status, "status")
        return self._dao.query.filter(status=status.value).all().total

    def count_by_payment_status(self, payment_status) -> int:
        payment_status = coerce_enum(PaymentStatus, payment_status, "payment_status")
        return self._dao.query.filter(payment_status=payment_status.value).all().total

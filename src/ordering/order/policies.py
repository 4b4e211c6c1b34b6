"""Transition policies for the two order status axes.

Direct status updates are checked against a ``TransitionPolicy``. The
permissive policies allow any status to follow any other, which is the
behaviour existing clients depend on. The strict policies follow the
documented lifecycle and can be selected per environment through the
``[custom]`` section of ``domain.toml``.
"""

from protean.exceptions import ConfigurationError

from ordering.order.order import OrderStatus, PaymentStatus
from shared.exceptions import InvalidStateError
from shared.settings import custom_setting


class TransitionPolicy:
    def __init__(self, name, axis, transitions):
        self.name = name
        self.axis = axis
        self.transitions = {state: frozenset(targets) for state, targets in transitions.items()}

    @classmethod
    def permissive(cls, axis, states):
        states = list(states)
        return cls("permissive", axis, {state: states for state in states})

    def allows(self, current, target) -> bool:
        return target in self.transitions.get(current, frozenset())

    def check(self, current, target):
        if not self.allows(current, target):
            raise InvalidStateError({self.axis: [f"Cannot transition from {current.value} to {target.value}"]})


PERMISSIVE_ORDER_STATUS = TransitionPolicy.permissive("status", OrderStatus)

STRICT_ORDER_STATUS = TransitionPolicy(
    "strict",
    "status",
    {
        OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
        OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
        OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.REFUNDED},
        OrderStatus.DELIVERED: {OrderStatus.REFUNDED},
        OrderStatus.CANCELLED: set(),  # Terminal
        OrderStatus.REFUNDED: set(),  # Terminal
    },
)

PERMISSIVE_PAYMENT_STATUS = TransitionPolicy.permissive("payment_status", PaymentStatus)

STRICT_PAYMENT_STATUS = TransitionPolicy(
    "strict",
    "payment_status",
    {
        PaymentStatus.PENDING: {PaymentStatus.PAID, PaymentStatus.FAILED},
        PaymentStatus.FAILED: {PaymentStatus.PENDING, PaymentStatus.PAID},
        PaymentStatus.PAID: {PaymentStatus.REFUNDED},
        PaymentStatus.REFUNDED: set(),  # Terminal
    },
)

_ORDER_STATUS_POLICIES = {"permissive": PERMISSIVE_ORDER_STATUS, "strict": STRICT_ORDER_STATUS}
_PAYMENT_STATUS_POLICIES = {"permissive": PERMISSIVE_PAYMENT_STATUS, "strict": STRICT_PAYMENT_STATUS}


def _lookup(registry, setting):
    name = custom_setting(setting, "permissive")
    try:
        return registry[name]
    except KeyError:
        raise ConfigurationError(f"Unknown {setting} '{name}', expected one of {sorted(registry)}") from None


def order_status_policy() -> TransitionPolicy:
    """The fulfillment-status policy configured for the active domain."""
    return _lookup(_ORDER_STATUS_POLICIES, "order_transition_policy")


def payment_status_policy() -> TransitionPolicy:
    """The payment-status policy configured for the active domain."""
    return _lookup(_PAYMENT_STATUS_POLICIES, "payment_transition_policy")

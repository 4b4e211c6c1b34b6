"""Ordering bounded context: the Order lifecycle.

Owns the order state machine, the payment sub-state, and total-amount
computation. Emits ``OrderShipped`` for the catalogue to record sales.
"""

import structlog
from protean.domain import Domain

from shared.logging import configure_logging

configure_logging()

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)

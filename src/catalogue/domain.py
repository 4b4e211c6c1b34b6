"""Catalogue bounded context: products and their derived metrics.

Owns stock levels, view and sold counters, and the incremental rating
average. Records sales when the ordering domain ships an order.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging(log_dir="logs")

logger = get_logger(__name__)

# Domain Composition Root
catalogue = Domain(name="catalogue")

"""Ordering bounded context — Catalog lookup, Shopping Cart and Orders.

Handles per-user carts (CQRS), the priced and immutable Order record, and the
checkout flow that converts a cart into an order inside one unit of work.
"""

from protean.domain import Domain

from ordering.utils.logging import configure_logging, get_logger

configure_logging()

ordering = Domain(name="ordering")

logger = get_logger(__name__)

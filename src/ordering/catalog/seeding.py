"""Demo catalog data for local development."""

from decimal import Decimal

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.catalog.product import CatalogProduct

logger = structlog.get_logger(__name__)

DEMO_PRODUCTS = [
    ("prod-espresso-beans", "Espresso Beans 1kg", Decimal("30.00"), 50),
    ("prod-pour-over-kettle", "Pour-over Kettle", Decimal("45.00"), 20),
    ("prod-ceramic-mug", "Ceramic Mug", Decimal("20.00"), 100),
    ("prod-burr-grinder", "Burr Grinder", Decimal("129.99"), 8),
]


def seed_catalog(products=None) -> int:
    """Register each product that is not already in the catalog. Returns how many were added."""
    repo = current_domain.repository_for(CatalogProduct)
    added = 0
    for product_id, name, price, stock in products or DEMO_PRODUCTS:
        try:
            repo.get(product_id)
        except ObjectNotFoundError:
            repo.add(CatalogProduct.register(product_id=product_id, name=name, price=price, stock=stock))
            added += 1

    logger.info("Catalog seeded", added=added)
    return added

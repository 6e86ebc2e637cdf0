"""Domain events for the CatalogProduct aggregate."""

from protean.fields import Boolean, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="CatalogProduct")
class ProductRegistered:
    """A product became resolvable in the catalog."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    price = String(required=True)  # decimal text
    stock = Integer(required=True)


@ordering.event(part_of="CatalogProduct")
class ProductRepriced:
    """The current catalog price of a product changed."""

    __version__ = 1

    product_id = Identifier(required=True)
    previous_price = String(required=True)
    new_price = String(required=True)


@ordering.event(part_of="CatalogProduct")
class ProductStockAdjusted:
    """The available stock of a product changed."""

    __version__ = 1

    product_id = Identifier(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)


@ordering.event(part_of="CatalogProduct")
class ProductAvailabilityChanged:
    """A product was activated or withdrawn from sale."""

    __version__ = 1

    product_id = Identifier(required=True)
    is_active = Boolean(required=True)

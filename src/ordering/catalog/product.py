"""CatalogProduct aggregate — the catalog lookup side of checkout.

Ordering only needs to resolve a product id into its current price, stock and
availability. Product and category management is handled elsewhere; this
aggregate holds just the fields checkout reads, plus the few mutations that
change them.
"""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, Integer, String

from ordering.catalog.events import (
    ProductAvailabilityChanged,
    ProductRegistered,
    ProductRepriced,
    ProductStockAdjusted,
)
from ordering.domain import ordering
from ordering.shared.money import format_amount, is_amount, to_decimal


@ordering.aggregate
class CatalogProduct:
    product_id = Identifier(identifier=True, required=True)
    name = String(required=True, max_length=255)
    price = String(required=True, max_length=32)  # decimal text, e.g. "30.00"
    stock = Integer(default=0, min_value=0)
    is_active = Boolean(default=True)

    @invariant.post
    def price_must_be_a_non_negative_amount(self):
        if not is_amount(self.price):
            raise ValidationError({"price": [f"Price must be a non-negative decimal amount, got {self.price!r}"]})

    @property
    def unit_price(self):
        return to_decimal(self.price)

    @classmethod
    def register(cls, product_id, name, price, stock=0):
        product = cls(
            product_id=product_id,
            name=name,
            price=format_amount(price),
            stock=stock,
            is_active=True,
        )
        product.raise_(
            ProductRegistered(
                product_id=str(product_id),
                name=name,
                price=product.price,
                stock=stock,
            )
        )
        return product

    def reprice(self, new_price):
        """Change the current catalog price. Placed orders keep their own snapshot."""
        previous_price = self.price
        self.price = format_amount(new_price)
        self.raise_(
            ProductRepriced(
                product_id=str(self.product_id),
                previous_price=previous_price,
                new_price=self.price,
            )
        )

    def adjust_stock(self, new_stock):
        if new_stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

        previous_stock = self.stock
        self.stock = new_stock
        self.raise_(
            ProductStockAdjusted(
                product_id=str(self.product_id),
                previous_stock=previous_stock,
                new_stock=new_stock,
            )
        )

    def withdraw(self):
        """Take the product off sale. Carts still holding it can no longer check out."""
        self.is_active = False
        self.raise_(ProductAvailabilityChanged(product_id=str(self.product_id), is_active=False))

    def has_stock_for(self, quantity):
        return self.is_active and self.stock >= quantity

"""Store abstractions the order assembly service depends on.

The service receives these as constructor arguments. ``repositories.py``
holds the Protean-backed implementations; tests can pass in-memory ones.
"""

from contextlib import AbstractContextManager
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from ordering.order.order import Order


@dataclass(frozen=True)
class ProductSnapshot:
    """Current catalog view of a product."""

    product_id: str
    name: str
    price: Decimal
    stock: int
    is_active: bool


@dataclass(frozen=True)
class CartLineView:
    """A cart line joined against the catalog. ``product`` is None when the product no longer exists."""

    product_id: str
    quantity: int
    product: ProductSnapshot | None

    @property
    def is_available(self) -> bool:
        return self.product is not None and self.product.is_active


class CatalogStore(Protocol):
    def find_product(self, product_id: str) -> ProductSnapshot | None: ...


class CartStore(Protocol):
    def get_cart(self, user_id: str) -> list[CartLineView]: ...

    def clear_cart(self, user_id: str) -> None: ...


class OrderStore(Protocol):
    def transaction(self) -> AbstractContextManager[None]: ...

    def create_order_atomic(self, order: Order) -> None: ...

    def get(self, order_id: str) -> Order: ...

    def save(self, order: Order) -> None: ...

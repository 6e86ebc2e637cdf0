"""Protean-backed implementations of the checkout stores.

Writes go through the active ``UnitOfWork``. When a command handler is
running, that is the handler's own unit of work; otherwise
``DomainOrderStore.transaction()`` opens one for the duration of the block.
"""

from contextlib import contextmanager

from protean.core.unit_of_work import UnitOfWork
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain, current_uow

from ordering.cart.cart import Cart
from ordering.catalog.product import CatalogProduct
from ordering.checkout.stores import CartLineView, CatalogStore, ProductSnapshot
from ordering.errors import STORE_ERRORS, PersistenceError
from ordering.order.order import Order


class DomainCatalogStore:
    def find_product(self, product_id) -> ProductSnapshot | None:
        try:
            product = current_domain.repository_for(CatalogProduct).get(str(product_id))
        except ObjectNotFoundError:
            return None
        return ProductSnapshot(
            product_id=str(product.product_id),
            name=product.name,
            price=product.unit_price,
            stock=product.stock,
            is_active=product.is_active,
        )


class DomainCartStore:
    def __init__(self, catalog: CatalogStore | None = None) -> None:
        self.catalog = catalog or DomainCatalogStore()

    def get_cart(self, user_id) -> list[CartLineView]:
        cart = current_domain.repository_for(Cart).for_user(user_id)
        return [
            CartLineView(
                product_id=str(line.product_id),
                quantity=line.quantity,
                product=self.catalog.find_product(line.product_id),
            )
            for line in cart.items
        ]

    def clear_cart(self, user_id) -> None:
        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(user_id)
        if cart.is_empty:
            return
        cart.clear()
        repo.add(cart)


class DomainOrderStore:
    @contextmanager
    def transaction(self):
        if current_uow:
            yield
            return

        uow = UnitOfWork()
        uow.start()
        try:
            yield
        except Exception:
            uow.rollback()
            raise

        try:
            uow.commit()
        except STORE_ERRORS as exc:
            if uow.in_progress:
                uow.rollback()
            raise PersistenceError("commit order transaction", str(exc)) from exc

    def create_order_atomic(self, order: Order) -> None:
        current_domain.repository_for(Order).add(order)

    def get(self, order_id) -> Order:
        return current_domain.repository_for(Order).get(str(order_id))

    def save(self, order: Order) -> None:
        current_domain.repository_for(Order).add(order)

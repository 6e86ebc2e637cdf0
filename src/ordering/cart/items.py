"""Cart line management — commands and handler.

Stock is validated against the catalog whenever a quantity grows. It is not
checked again when the order is placed.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart
from ordering.catalog.product import CatalogProduct
from ordering.domain import ordering


@ordering.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@ordering.command(part_of="Cart")
class UpdateCartQuantity:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    new_quantity = Integer(required=True, min_value=1)


@ordering.command(part_of="Cart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


def _ensure_stock(product_id, requested_quantity):
    product = current_domain.repository_for(CatalogProduct).get(str(product_id))
    if not product.is_active:
        raise ValidationError({"product_id": [f"Product {product_id} is not available"]})
    if not product.has_stock_for(requested_quantity):
        raise ValidationError(
            {
                "quantity": [
                    f"Insufficient stock for product {product_id}: "
                    f"requested {requested_quantity}, available {product.stock}"
                ]
            }
        )


@ordering.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id)
        _ensure_stock(command.product_id, cart.quantity_of(command.product_id) + command.quantity)
        cart.add_item(product_id=command.product_id, quantity=command.quantity)
        repo.add(cart)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.user_id)
        _ensure_stock(command.product_id, command.new_quantity)
        cart.update_item_quantity(
            product_id=command.product_id,
            new_quantity=command.new_quantity,
        )
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.user_id)
        cart.remove_item(product_id=command.product_id)
        repo.add(cart)

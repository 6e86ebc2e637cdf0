"""Repository for the Cart aggregate."""

from protean.exceptions import ObjectNotFoundError

from ordering.cart.cart import Cart
from ordering.domain import ordering


@ordering.repository(part_of=Cart)
class CartRepository:
    def for_user(self, user_id) -> Cart:
        """Return the user's cart, or a new empty one if the user has never added anything."""
        try:
            return self.get(str(user_id))
        except ObjectNotFoundError:
            return Cart.create(user_id=str(user_id))

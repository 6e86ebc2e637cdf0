"""Error kinds raised by the checkout flow.

Field-level validation problems and illegal state transitions are reported
with Protean's ``ValidationError`` like everywhere else in the domain. The
classes below cover the cases a caller needs to tell apart when turning a
failed checkout into a user-facing message.
"""

from contextlib import contextmanager

from protean.exceptions import DatabaseError, ExpectedVersionError, TransactionError, ValidationError


class OrderingError(Exception):
    """Base class for checkout errors."""


class EmptyCartError(OrderingError):
    """The user's cart had no lines when an order was requested."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"Cart is empty for user {user_id}")


class ProductUnavailableError(OrderingError):
    """A cart line references a product that can no longer be resolved in the catalog."""

    def __init__(self, product_id: str) -> None:
        self.product_id = product_id
        super().__init__(f"Product is no longer available: {product_id}")


# Failures raised by the unit of work or its providers while writing.
STORE_ERRORS = (DatabaseError, TransactionError, ExpectedVersionError, ValidationError)


class PersistenceError(OrderingError):
    """The order transaction could not be completed and was rolled back.

    The store's own exception is chained as ``__cause__``.
    """

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(f"Could not {operation}: {reason}")


@contextmanager
def persistence_errors(operation: str):
    """Re-raise store failures inside the block as ``PersistenceError``."""
    try:
        yield
    except STORE_ERRORS as exc:
        raise PersistenceError(operation, str(exc)) from exc

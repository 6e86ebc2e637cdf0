"""Domain events for the Order aggregate.

Monetary values travel as two-place decimal text, the same form the aggregate
stores them in.
"""

from protean.fields import DateTime, Identifier, Integer, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A cart was converted into a priced order."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity, unit_price}
    line_count = Integer(required=True)
    subtotal = String(required=True)
    tax = String(required=True)
    shipping = String(required=True)
    total = String(required=True)
    currency = String(default="USD")
    payment_method = String(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderConfirmed:
    __version__ = 1

    order_id = Identifier(required=True)
    confirmed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderShipped:
    __version__ = 1

    order_id = Identifier(required=True)
    tracking_number = String()
    shipped_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderDelivered:
    __version__ = 1

    order_id = Identifier(required=True)
    delivered_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    cancelled_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderRefunded:
    __version__ = 1

    order_id = Identifier(required=True)
    refund_amount = String(required=True)
    refunded_at = DateTime(required=True)


@ordering.event(part_of="Order")
class PaymentReceived:
    """Payment for the order was captured (or simulated) and the order confirmed."""

    __version__ = 1

    order_id = Identifier(required=True)
    amount = String(required=True)
    payment_method = String(required=True)
    payment_reference = String()
    paid_at = DateTime(required=True)


@ordering.event(part_of="Order")
class PaymentFailed:
    __version__ = 1

    order_id = Identifier(required=True)
    payment_reference = String()
    reason = String()
    failed_at = DateTime(required=True)

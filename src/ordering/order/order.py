"""Order aggregate (CQRS) — the immutable, priced record a cart turns into.

Everything captured at placement (lines with their frozen unit prices,
addresses, the price breakdown, payment method and notes) never changes after
the order exists. Only two fields move afterwards, each through its own
state machine:

Order status:
    PENDING → CONFIRMED → SHIPPED → DELIVERED
    PENDING, CONFIRMED → CANCELLED
    CONFIRMED, SHIPPED → REFUNDED (payment must have been received)
    DELIVERED, CANCELLED and REFUNDED are terminal.

Payment status (independent of order status):
    PENDING → PAID
    PENDING → FAILED → PAID
"""

import json
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from ordering.domain import ordering
from ordering.order.events import (
    OrderCancelled,
    OrderConfirmed,
    OrderDelivered,
    OrderPlaced,
    OrderRefunded,
    OrderShipped,
    PaymentFailed,
    PaymentReceived,
)
from ordering.shared.money import format_amount, is_amount, to_decimal


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


class PaymentStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.SHIPPED, OrderStatus.CANCELLED, OrderStatus.REFUNDED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.REFUNDED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
    OrderStatus.REFUNDED: set(),  # Terminal
}

_VALID_PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.PAID, PaymentStatus.FAILED},
    PaymentStatus.FAILED: {PaymentStatus.PAID},
    PaymentStatus.PAID: set(),
}

TERMINAL_STATES = frozenset(status for status, targets in _VALID_TRANSITIONS.items() if not targets)

_AMOUNT_FIELDS = ("subtotal", "tax", "shipping", "total")


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class Address:
    """A shipping or billing address captured at checkout.

    Addresses belong to the order that recorded them; changing a saved address
    elsewhere never rewrites where an order was sent.
    """

    first_name = String(required=True, max_length=100)
    last_name = String(required=True, max_length=100)
    address1 = String(required=True, max_length=255)
    address2 = String(max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    zip_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)
    phone = String(required=True, max_length=50)


@ordering.value_object(part_of="Order")
class OrderPricing:
    """Price breakdown locked at placement, as two-place decimal text.

    ``total`` always equals ``subtotal + tax + shipping`` exactly.
    """

    subtotal = String(required=True, max_length=32)
    tax = String(required=True, max_length=32)
    shipping = String(required=True, max_length=32)
    total = String(required=True, max_length=32)
    currency = String(max_length=3, default="USD")

    @invariant.post
    def amounts_must_be_non_negative_decimals(self):
        for name in _AMOUNT_FIELDS:
            if not is_amount(getattr(self, name)):
                raise ValidationError({name: [f"{name} must be a non-negative decimal amount"]})

    @invariant.post
    def total_must_equal_sum_of_parts(self):
        if not all(is_amount(getattr(self, name)) for name in _AMOUNT_FIELDS):
            return
        expected = to_decimal(self.subtotal) + to_decimal(self.tax) + to_decimal(self.shipping)
        if to_decimal(self.total) != expected:
            raise ValidationError(
                {"total": [f"Total {self.total} does not equal subtotal + tax + shipping ({expected})"]}
            )

    @property
    def total_amount(self) -> Decimal:
        return to_decimal(self.total)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderLine:
    """A product, quantity and the unit price it was sold at.

    ``unit_price`` is copied from the catalog when the order is placed and is
    never refreshed, so later catalog price changes leave the order untouched.
    """

    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = String(required=True, max_length=32)

    @property
    def price(self) -> Decimal:
        return to_decimal(self.unit_price)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    order_number = String(required=True, max_length=32, unique=True)
    user_id = Identifier(required=True)
    items = HasMany(OrderLine)
    shipping_address = ValueObject(Address, required=True)
    billing_address = ValueObject(Address)
    pricing = ValueObject(OrderPricing, required=True)
    payment_method = String(required=True, max_length=50)
    payment_reference = String(max_length=255)
    notes = Text()
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    tracking_number = String(max_length=255)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def order_must_have_lines(self):
        if not self.items:
            raise ValidationError({"items": ["An order must have at least one line"]})

    @invariant.post
    def line_prices_must_be_non_negative_decimals(self):
        for line in self.items:
            if not is_amount(line.unit_price):
                raise ValidationError(
                    {"items": [f"Unit price for product {line.product_id} must be a non-negative decimal amount"]}
                )

    @invariant.post
    def subtotal_must_match_lines(self):
        if not self.items or self.pricing is None:
            return
        if not all(is_amount(line.unit_price) for line in self.items) or not is_amount(self.pricing.subtotal):
            return
        lines_total = sum((line.line_total for line in self.items), Decimal("0"))
        if lines_total != to_decimal(self.pricing.subtotal):
            raise ValidationError(
                {"pricing": [f"Subtotal {self.pricing.subtotal} does not match lines ({lines_total})"]}
            )

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        user_id,
        order_number,
        lines,
        breakdown,
        shipping_address,
        payment_method,
        billing_address=None,
        notes=None,
        currency="USD",
    ):
        """Create a PENDING order from priced cart lines.

        Args:
            user_id: The customer placing the order.
            order_number: Human-readable number, unique across orders.
            lines: Iterable of objects with ``product_id``, ``product_name``,
                ``quantity`` and ``unit_price`` (a ``Decimal``).
            breakdown: Object with ``subtotal``, ``tax``, ``shipping`` and
                ``total`` as ``Decimal``.
            shipping_address: ``Address`` or a dict of its fields.
            payment_method: Non-empty payment method label.
            billing_address: Optional ``Address`` or dict.
            notes: Optional free-text notes.
        """
        if not payment_method or not str(payment_method).strip():
            raise ValidationError({"payment_method": ["Payment method is required"]})

        now = datetime.now(UTC)
        order_lines = [
            OrderLine(
                product_id=str(line.product_id),
                product_name=line.product_name,
                quantity=line.quantity,
                unit_price=format_amount(line.unit_price),
            )
            for line in lines
        ]

        order = cls(
            order_number=order_number,
            user_id=str(user_id),
            items=order_lines,
            shipping_address=_as_address(shipping_address),
            billing_address=_as_address(billing_address) if billing_address else None,
            pricing=OrderPricing(
                subtotal=format_amount(breakdown.subtotal),
                tax=format_amount(breakdown.tax),
                shipping=format_amount(breakdown.shipping),
                total=format_amount(breakdown.total),
                currency=currency,
            ),
            payment_method=payment_method,
            notes=notes,
            status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                user_id=str(user_id),
                items=json.dumps(
                    [
                        {
                            "product_id": str(line.product_id),
                            "quantity": line.quantity,
                            "unit_price": line.unit_price,
                        }
                        for line in order_lines
                    ]
                ),
                line_count=len(order_lines),
                subtotal=order.pricing.subtotal,
                tax=order.pricing.tax,
                shipping=order.pricing.shipping,
                total=order.pricing.total,
                currency=currency,
                payment_method=payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State transition helpers
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def _assert_can_transition_payment(self, target_status):
        current = PaymentStatus(self.payment_status)
        if target_status not in _VALID_PAYMENT_TRANSITIONS.get(current, set()):
            raise ValidationError(
                {"payment_status": [f"Cannot transition payment from {current.value} to {target_status.value}"]}
            )

    @property
    def is_terminal(self):
        return OrderStatus(self.status) in TERMINAL_STATES

    # -------------------------------------------------------------------
    # Order lifecycle transitions
    # -------------------------------------------------------------------
    def confirm(self):
        self._assert_can_transition(OrderStatus.CONFIRMED)
        now = datetime.now(UTC)
        self.status = OrderStatus.CONFIRMED.value
        self.updated_at = now
        self.raise_(OrderConfirmed(order_id=str(self.id), confirmed_at=now))

    def ship(self, tracking_number=None):
        self._assert_can_transition(OrderStatus.SHIPPED)
        now = datetime.now(UTC)
        self.status = OrderStatus.SHIPPED.value
        self.tracking_number = tracking_number
        self.updated_at = now
        self.raise_(
            OrderShipped(
                order_id=str(self.id),
                tracking_number=tracking_number,
                shipped_at=now,
            )
        )

    def deliver(self):
        self._assert_can_transition(OrderStatus.DELIVERED)
        now = datetime.now(UTC)
        self.status = OrderStatus.DELIVERED.value
        self.updated_at = now
        self.raise_(OrderDelivered(order_id=str(self.id), delivered_at=now))

    def cancel(self):
        previous_status = self.status
        self._assert_can_transition(OrderStatus.CANCELLED)
        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.updated_at = now
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                previous_status=previous_status,
                cancelled_at=now,
            )
        )

    def refund(self):
        """Refund the full order total. Only orders whose payment was received qualify."""
        self._assert_can_transition(OrderStatus.REFUNDED)
        if PaymentStatus(self.payment_status) != PaymentStatus.PAID:
            raise ValidationError({"payment_status": ["Only paid orders can be refunded"]})

        now = datetime.now(UTC)
        self.status = OrderStatus.REFUNDED.value
        self.updated_at = now
        self.raise_(
            OrderRefunded(
                order_id=str(self.id),
                refund_amount=self.pricing.total,
                refunded_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def record_payment_success(self, payment_reference=None):
        """Mark the order paid and confirmed.

        No transition guard applies: this is how a verified (or, in development,
        simulated) payment is applied to the order.
        """
        now = datetime.now(UTC)
        self.payment_status = PaymentStatus.PAID.value
        self.status = OrderStatus.CONFIRMED.value
        if payment_reference:
            self.payment_reference = payment_reference
        self.updated_at = now
        self.raise_(
            PaymentReceived(
                order_id=str(self.id),
                amount=self.pricing.total,
                payment_method=self.payment_method,
                payment_reference=payment_reference,
                paid_at=now,
            )
        )

    def record_payment_failure(self, payment_reference=None, reason=None):
        self._assert_can_transition_payment(PaymentStatus.FAILED)
        now = datetime.now(UTC)
        self.payment_status = PaymentStatus.FAILED.value
        if payment_reference:
            self.payment_reference = payment_reference
        self.updated_at = now
        self.raise_(
            PaymentFailed(
                order_id=str(self.id),
                payment_reference=payment_reference,
                reason=reason,
                failed_at=now,
            )
        )

    def update_payment_status(self, payment_status, payment_reference=None):
        """Administrative payment update, guarded by the payment state machine.

        Unlike ``record_payment_success`` this leaves the order status alone.
        """
        try:
            target = PaymentStatus(payment_status)
        except ValueError:
            raise ValidationError({"payment_status": [f"Unknown payment status: {payment_status}"]}) from None
        self._assert_can_transition_payment(target)

        if target == PaymentStatus.FAILED:
            self.record_payment_failure(payment_reference=payment_reference)
            return

        now = datetime.now(UTC)
        self.payment_status = target.value
        if payment_reference:
            self.payment_reference = payment_reference
        self.updated_at = now
        self.raise_(
            PaymentReceived(
                order_id=str(self.id),
                amount=self.pricing.total,
                payment_method=self.payment_method,
                payment_reference=payment_reference,
                paid_at=now,
            )
        )


def _as_address(value):
    if isinstance(value, Address):
        return value
    return Address(**value)

"""Tests for the Order payment state machine."""

from decimal import Decimal

import pytest
from ordering.checkout.pricing import PriceBreakdown, PricedLine
from ordering.order.events import PaymentFailed, PaymentReceived
from ordering.order.order import Order, OrderStatus, PaymentStatus
from protean.exceptions import ValidationError


@pytest.fixture()
def order(shipping_address):
    order = Order.place(
        user_id="user-001",
        order_number="ORD-20240101-PAY001",
        lines=[PricedLine(product_id="prod-c", product_name="Mug", quantity=1, unit_price=Decimal("20.00"))],
        breakdown=PriceBreakdown(
            subtotal=Decimal("20.00"),
            tax=Decimal("2.00"),
            shipping=Decimal("5.00"),
            total=Decimal("27.00"),
        ),
        shipping_address=shipping_address,
        payment_method="credit_card",
    )
    order._events.clear()
    return order


class TestRecordPaymentSuccess:
    def test_marks_paid_and_confirmed(self, order):
        order.record_payment_success(payment_reference="sim_123")
        assert order.payment_status == PaymentStatus.PAID.value
        assert order.status == OrderStatus.CONFIRMED.value
        assert order.payment_reference == "sim_123"

    def test_raises_payment_received(self, order):
        order.record_payment_success()
        event = order._events[-1]
        assert isinstance(event, PaymentReceived)
        assert event.amount == "27.00"

    def test_applies_after_failure(self, order):
        order.record_payment_failure(reason="Card declined")
        order.record_payment_success()
        assert order.payment_status == PaymentStatus.PAID.value


class TestRecordPaymentFailure:
    def test_marks_failed(self, order):
        order.record_payment_failure(payment_reference="ref-1", reason="Card declined")
        assert order.payment_status == PaymentStatus.FAILED.value
        assert order.status == OrderStatus.PENDING.value
        event = order._events[-1]
        assert isinstance(event, PaymentFailed)
        assert event.reason == "Card declined"

    def test_cannot_fail_after_paid(self, order):
        order.record_payment_success()
        with pytest.raises(ValidationError):
            order.record_payment_failure()


class TestUpdatePaymentStatus:
    def test_pending_to_paid_leaves_order_status(self, order):
        order.update_payment_status("PAID", payment_reference="ref-9")
        assert order.payment_status == PaymentStatus.PAID.value
        assert order.status == OrderStatus.PENDING.value
        assert order.payment_reference == "ref-9"

    def test_pending_to_failed(self, order):
        order.update_payment_status("FAILED")
        assert order.payment_status == PaymentStatus.FAILED.value

    def test_failed_to_paid(self, order):
        order.update_payment_status("FAILED")
        order.update_payment_status("PAID")
        assert order.payment_status == PaymentStatus.PAID.value

    @pytest.mark.parametrize("target", ["PENDING", "FAILED", "PAID"])
    def test_paid_is_final(self, order, target):
        order.update_payment_status("PAID")
        with pytest.raises(ValidationError):
            order.update_payment_status(target)

    def test_back_to_pending_rejected(self, order):
        with pytest.raises(ValidationError):
            order.update_payment_status("PENDING")

    def test_unknown_status_rejected(self, order):
        with pytest.raises(ValidationError) as exc_info:
            order.update_payment_status("REFUNDED")
        assert "payment_status" in exc_info.value.messages

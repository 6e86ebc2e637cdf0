"""Simulated payment verifier for development and testing.

Approves every payment without contacting a gateway. It can be switched to
decline at runtime so failure paths can be exercised.
"""

from uuid import uuid4

from ordering.checkout.verification.port import PaymentVerification, PaymentVerifier
from ordering.order.order import Order


class SimulatedPaymentVerifier(PaymentVerifier):
    def __init__(self) -> None:
        self.should_approve: bool = True
        self.failure_reason: str = "Payment declined"
        self.verified_orders: list[str] = []

    def configure(self, should_approve: bool, failure_reason: str = "Payment declined") -> None:
        self.should_approve = should_approve
        self.failure_reason = failure_reason

    def verify(self, order: Order) -> PaymentVerification:
        self.verified_orders.append(str(order.id))
        if self.should_approve:
            return PaymentVerification(approved=True, reference=f"sim_{uuid4().hex[:12]}")
        return PaymentVerification(approved=False, failure_reason=self.failure_reason)

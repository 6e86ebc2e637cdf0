"""Payment verification port.

Decides whether a payment for an order should be treated as captured. The
order lifecycle only sees the resulting ``PaymentVerification``, so a real
gateway-backed verifier can replace the simulated one without touching it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ordering.order.order import Order


@dataclass(frozen=True)
class PaymentVerification:
    approved: bool
    reference: str | None = None
    failure_reason: str | None = None


class PaymentVerifier(ABC):
    @abstractmethod
    def verify(self, order: Order) -> PaymentVerification:
        """Check whether payment for ``order`` has been received."""
        ...

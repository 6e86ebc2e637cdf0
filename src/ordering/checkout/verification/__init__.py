"""Payment verifier factory.

``get_verifier()`` / ``set_verifier()`` swap the active implementation.
``SimulatedPaymentVerifier`` is the default.
"""

from ordering.checkout.verification.port import PaymentVerification, PaymentVerifier
from ordering.checkout.verification.simulated import SimulatedPaymentVerifier

__all__ = [
    "PaymentVerification",
    "PaymentVerifier",
    "SimulatedPaymentVerifier",
    "get_verifier",
    "reset_verifier",
    "set_verifier",
]

_current_verifier: PaymentVerifier | None = None


def get_verifier() -> PaymentVerifier:
    global _current_verifier
    if _current_verifier is None:
        _current_verifier = SimulatedPaymentVerifier()
    return _current_verifier


def set_verifier(verifier: PaymentVerifier) -> None:
    """Override the active verifier (useful for tests)."""
    global _current_verifier
    _current_verifier = verifier


def reset_verifier() -> None:
    global _current_verifier
    _current_verifier = None

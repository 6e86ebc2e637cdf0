"""Checkout policy settings.

Infrastructure configuration (databases, brokers, event store) lives in
``domain.toml`` and is handled by Protean. The values here are business
policy knobs read from the environment, with defaults matching the storefront's
flat-rate policy.
"""

import os
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class CheckoutSettings:
    tax_rate: Decimal = Decimal("0.10")
    free_shipping_threshold: Decimal = Decimal("100")
    flat_shipping_fee: Decimal = Decimal("5")
    currency: str = "USD"
    order_number_prefix: str = "ORD"

    @classmethod
    def from_env(cls) -> "CheckoutSettings":
        """Build settings from ``TAX_RATE``, ``FREE_SHIPPING_THRESHOLD`` and friends."""
        defaults = cls()
        return cls(
            tax_rate=Decimal(os.getenv("TAX_RATE", str(defaults.tax_rate))),
            free_shipping_threshold=Decimal(
                os.getenv("FREE_SHIPPING_THRESHOLD", str(defaults.free_shipping_threshold))
            ),
            flat_shipping_fee=Decimal(os.getenv("FLAT_SHIPPING_FEE", str(defaults.flat_shipping_fee))),
            currency=os.getenv("CURRENCY", defaults.currency),
            order_number_prefix=os.getenv("ORDER_NUMBER_PREFIX", defaults.order_number_prefix),
        )


_current_settings: CheckoutSettings | None = None


def get_settings() -> CheckoutSettings:
    """Return the active checkout settings, loading them from the environment once."""
    global _current_settings
    if _current_settings is None:
        _current_settings = CheckoutSettings.from_env()
    return _current_settings


def set_settings(settings: CheckoutSettings) -> None:
    """Override the active settings (useful for tests)."""
    global _current_settings
    _current_settings = settings


def reset_settings() -> None:
    global _current_settings
    _current_settings = None

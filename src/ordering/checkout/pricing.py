"""Checkout pricing — tax and shipping policies and the price calculator.

All arithmetic is done on ``Decimal``. Only tax needs rounding: line totals of
two-place prices are already exact to the cent, and shipping is a flat fee.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from ordering.config import CheckoutSettings, get_settings
from ordering.shared.money import ZERO, quantize, to_decimal


class TaxPolicy(ABC):
    @abstractmethod
    def tax_for(self, subtotal: Decimal) -> Decimal:
        """Tax owed on ``subtotal``, rounded to cents."""
        ...


class ShippingPolicy(ABC):
    @abstractmethod
    def shipping_for(self, subtotal: Decimal) -> Decimal:
        """Shipping charge for an order with the given subtotal."""
        ...


class FlatRateTax(TaxPolicy):
    def __init__(self, rate: Decimal) -> None:
        self.rate = to_decimal(rate)

    def tax_for(self, subtotal: Decimal) -> Decimal:
        return quantize(subtotal * self.rate)


class ThresholdShipping(ShippingPolicy):
    """Free shipping strictly above ``threshold``, otherwise a flat fee."""

    def __init__(self, threshold: Decimal, flat_fee: Decimal) -> None:
        self.threshold = to_decimal(threshold)
        self.flat_fee = quantize(to_decimal(flat_fee))

    def shipping_for(self, subtotal: Decimal) -> Decimal:
        if subtotal > self.threshold:
            return ZERO
        return self.flat_fee


@dataclass(frozen=True)
class PricedLine:
    """A cart line with the catalog price frozen at order-creation time."""

    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal


class PricingCalculator:
    def __init__(self, tax_policy: TaxPolicy, shipping_policy: ShippingPolicy) -> None:
        self.tax_policy = tax_policy
        self.shipping_policy = shipping_policy

    @classmethod
    def from_settings(cls, settings: CheckoutSettings | None = None) -> "PricingCalculator":
        settings = settings or get_settings()
        return cls(
            tax_policy=FlatRateTax(settings.tax_rate),
            shipping_policy=ThresholdShipping(settings.free_shipping_threshold, settings.flat_shipping_fee),
        )

    def quote(self, lines: Iterable[PricedLine]) -> PriceBreakdown:
        subtotal = quantize(sum((line.line_total for line in lines), ZERO))
        tax = self.tax_policy.tax_for(subtotal)
        shipping = self.shipping_policy.shipping_for(subtotal)
        return PriceBreakdown(
            subtotal=subtotal,
            tax=tax,
            shipping=shipping,
            total=subtotal + tax + shipping,
        )

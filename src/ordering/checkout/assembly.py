"""Order assembly — converts a user's cart into a priced, persisted order.

``create_order`` runs inside one store transaction: it reads the cart, freezes
the current catalog prices into order lines, prices the order, writes it and
empties the cart. Any failure rolls all of it back. Nothing is retried.
"""

from dataclasses import dataclass

import structlog
from protean.exceptions import ValidationError

from ordering.checkout.numbering import OrderNumberGenerator
from ordering.checkout.pricing import PricedLine, PricingCalculator
from ordering.checkout.stores import CartLineView, CartStore, CatalogStore, OrderStore
from ordering.checkout.verification import PaymentVerifier, get_verifier
from ordering.config import CheckoutSettings, get_settings
from ordering.errors import EmptyCartError, ProductUnavailableError, persistence_errors
from ordering.order.order import Address, Order

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CheckoutDetails:
    """What the customer supplies at checkout besides the cart itself."""

    shipping_address: Address | dict
    payment_method: str
    billing_address: Address | dict | None = None
    notes: str | None = None

    def __post_init__(self):
        if not self.payment_method or not self.payment_method.strip():
            raise ValidationError({"payment_method": ["Payment method is required"]})
        if not self.shipping_address:
            raise ValidationError({"shipping_address": ["Shipping address is required"]})


class OrderAssemblyService:
    def __init__(
        self,
        catalog: CatalogStore,
        carts: CartStore,
        orders: OrderStore,
        calculator: PricingCalculator | None = None,
        number_generator: OrderNumberGenerator | None = None,
        verifier: PaymentVerifier | None = None,
        settings: CheckoutSettings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.catalog = catalog
        self.carts = carts
        self.orders = orders
        self.calculator = calculator or PricingCalculator.from_settings(self.settings)
        self.number_generator = number_generator or OrderNumberGenerator(self.settings.order_number_prefix)
        self.verifier = verifier

    def create_order(self, user_id, details: CheckoutDetails) -> Order:
        user_id = str(user_id)
        with self.orders.transaction():
            cart_lines = self.carts.get_cart(user_id)
            if not cart_lines:
                raise EmptyCartError(user_id)

            priced_lines = [self._freeze_price(line) for line in cart_lines]
            breakdown = self.calculator.quote(priced_lines)

            order = Order.place(
                user_id=user_id,
                order_number=self.number_generator(),
                lines=priced_lines,
                breakdown=breakdown,
                shipping_address=details.shipping_address,
                billing_address=details.billing_address,
                payment_method=details.payment_method,
                notes=details.notes,
                currency=self.settings.currency,
            )

            with persistence_errors("create order"):
                self.orders.create_order_atomic(order)
                self.carts.clear_cart(user_id)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_number=order.order_number,
            user_id=user_id,
            line_count=len(priced_lines),
            total=order.pricing.total,
        )
        return order

    def simulate_payment_success(self, order_id) -> Order:
        """Mark the order paid and confirmed without talking to a payment gateway.

        The active ``PaymentVerifier`` decides the outcome. The default simulated
        verifier always approves; a declining verifier marks the payment FAILED.
        """
        verifier = self.verifier or get_verifier()
        with self.orders.transaction():
            order = self.orders.get(order_id)
            verification = verifier.verify(order)
            if verification.approved:
                order.record_payment_success(payment_reference=verification.reference)
            else:
                order.record_payment_failure(
                    payment_reference=verification.reference,
                    reason=verification.failure_reason,
                )
            with persistence_errors("record payment"):
                self.orders.save(order)

        logger.info(
            "Payment verified",
            order_id=str(order.id),
            approved=verification.approved,
            payment_status=order.payment_status,
        )
        return order

    def _freeze_price(self, line: CartLineView) -> PricedLine:
        if not line.is_available:
            logger.warning("Cart line references unavailable product", product_id=line.product_id)
            raise ProductUnavailableError(line.product_id)
        return PricedLine(
            product_id=line.product_id,
            product_name=line.product.name,
            quantity=line.quantity,
            unit_price=line.product.price,
        )


def build_assembly_service(**overrides) -> OrderAssemblyService:
    """An assembly service wired to the Protean repositories of the active domain."""
    from ordering.checkout.repositories import DomainCartStore, DomainCatalogStore, DomainOrderStore

    catalog = overrides.pop("catalog", None) or DomainCatalogStore()
    return OrderAssemblyService(
        catalog=catalog,
        carts=overrides.pop("carts", None) or DomainCartStore(catalog),
        orders=overrides.pop("orders", None) or DomainOrderStore(),
        **overrides,
    )

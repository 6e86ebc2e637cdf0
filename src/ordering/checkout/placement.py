"""Order placement — commands and handler.

The handler delegates to ``OrderAssemblyService`` and runs inside the
handler's unit of work, so the order write and the cart clear commit together.
"""

import json

from protean import handle
from protean.fields import Identifier, String, Text

from ordering.checkout.assembly import CheckoutDetails, build_assembly_service
from ordering.domain import ordering
from ordering.order.order import Order


@ordering.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    shipping_address = Text(required=True)  # JSON: address dict
    billing_address = Text()  # JSON: address dict
    payment_method = String(required=True, max_length=50)
    notes = Text()


@ordering.command(part_of="Order")
class SimulatePaymentSuccess:
    order_id = Identifier(required=True)


def _load_json(value):
    if value is None or isinstance(value, dict):
        return value
    return json.loads(value)


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        details = CheckoutDetails(
            shipping_address=_load_json(command.shipping_address),
            billing_address=_load_json(command.billing_address),
            payment_method=command.payment_method,
            notes=command.notes,
        )
        order = build_assembly_service().create_order(command.user_id, details)
        return str(order.id)

    @handle(SimulatePaymentSuccess)
    def simulate_payment_success(self, command):
        order = build_assembly_service().simulate_payment_success(command.order_id)
        return str(order.id)

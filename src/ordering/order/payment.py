"""Order payment status — command and handler.

Moves the payment through the payment state machine. The order status is
left alone; simulated payment capture lives in ``ordering.checkout.placement``.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order


@ordering.command(part_of="Order")
class UpdatePaymentStatus:
    order_id = Identifier(required=True)
    payment_status = String(required=True, max_length=20)
    payment_reference = String(max_length=255)


@ordering.command_handler(part_of=Order)
class PaymentStatusHandler:
    @handle(UpdatePaymentStatus)
    def update_payment_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.update_payment_status(
            command.payment_status,
            payment_reference=command.payment_reference,
        )
        repo.add(order)

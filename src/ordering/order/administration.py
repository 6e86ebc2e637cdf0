"""Back-office transitions of a placed order.

Each command names the order and moves it one step through its lifecycle.
The aggregate enforces which steps are legal from its current status.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class ConfirmOrder:
    order_id = Identifier(required=True)


@ordering.command(part_of="Order")
class ShipOrder:
    order_id = Identifier(required=True)
    tracking_number = String(max_length=255)


@ordering.command(part_of="Order")
class DeliverOrder:
    order_id = Identifier(required=True)


@ordering.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)


@ordering.command(part_of="Order")
class RefundOrder:
    order_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class OrderAdministrationHandler:
    def _transition(self, order_id, step: str, **kwargs) -> str:
        repo = current_domain.repository_for(Order)
        order = repo.get(order_id)
        previous = order.status
        getattr(order, step)(**kwargs)
        repo.add(order)

        logger.info("Order status changed", order_id=str(order.id), step=step, previous=previous, status=order.status)
        return str(order.id)

    @handle(ConfirmOrder)
    def confirm(self, command: ConfirmOrder) -> str:
        return self._transition(command.order_id, "confirm")

    @handle(ShipOrder)
    def ship(self, command: ShipOrder) -> str:
        return self._transition(command.order_id, "ship", tracking_number=command.tracking_number)

    @handle(DeliverOrder)
    def deliver(self, command: DeliverOrder) -> str:
        return self._transition(command.order_id, "deliver")

    @handle(CancelOrder)
    def cancel(self, command: CancelOrder) -> str:
        return self._transition(command.order_id, "cancel")

    @handle(RefundOrder)
    def refund(self, command: RefundOrder) -> str:
        return self._transition(command.order_id, "refund")

"""Order status changes: commands and handler."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from agristore.domain import agristore
from agristore.exceptions import OrderNotFound
from agristore.order.order import Order

logger = structlog.get_logger(__name__)


@agristore.command(part_of="Order")
class TransitionOrder:
    """Move an order to another status (admin dashboard)."""

    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    note = String(max_length=500)
    changed_by = String(max_length=100, default="admin")


@agristore.command(part_of="Order")
class CancelOrder:
    """Customer-initiated cancellation."""

    order_id = Identifier(required=True)
    note = String(max_length=500)


def load_order(order_id) -> Order:
    """Fetch an order, raising OrderNotFound when it does not exist."""
    try:
        return current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        raise OrderNotFound({"order_id": [f"Order {order_id} does not exist"]}) from None


@agristore.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(TransitionOrder)
    def transition_order(self, command):
        order = load_order(command.order_id)
        previous_status = order.status
        order.transition(command.status, note=command.note, changed_by=command.changed_by or "admin")
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order status changed",
            order_id=str(order.id),
            order_number=order.order_number,
            from_status=previous_status,
            to_status=order.status,
        )

    @handle(CancelOrder)
    def cancel_order(self, command):
        order = load_order(command.order_id)
        order.cancel(note=command.note)
        current_domain.repository_for(Order).add(order)

        logger.info("Order cancelled by customer", order_id=str(order.id), order_number=order.order_number)

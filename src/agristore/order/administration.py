"""Back-office order maintenance: tracking, notes, priority and deletion."""

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from agristore.domain import agristore
from agristore.order.order import Order
from agristore.order.status import load_order

logger = structlog.get_logger(__name__)


@agristore.command(part_of="Order")
class UpdateTrackingNumber:
    order_id = Identifier(required=True)
    tracking_number = String(required=True, max_length=100)


@agristore.command(part_of="Order")
class UpdateOrderNotes:
    order_id = Identifier(required=True)
    notes = Text()


@agristore.command(part_of="Order")
class SetOrderPriority:
    order_id = Identifier(required=True)
    priority = String(required=True, max_length=20)


@agristore.command(part_of="Order")
class DeleteOrder:
    """Remove an order permanently, whatever its status."""

    order_id = Identifier(required=True)


@agristore.command_handler(part_of=Order)
class OrderAdministrationHandler:
    @handle(UpdateTrackingNumber)
    def update_tracking_number(self, command):
        order = load_order(command.order_id)
        order.update_tracking(command.tracking_number)
        current_domain.repository_for(Order).add(order)

    @handle(UpdateOrderNotes)
    def update_notes(self, command):
        order = load_order(command.order_id)
        order.update_notes(command.notes)
        current_domain.repository_for(Order).add(order)

    @handle(SetOrderPriority)
    def set_priority(self, command):
        order = load_order(command.order_id)
        order.set_priority(command.priority)
        current_domain.repository_for(Order).add(order)

    @handle(DeleteOrder)
    def delete_order(self, command):
        order = load_order(command.order_id)
        current_domain.repository_for(Order).remove(order)

        logger.info(
            "Order deleted",
            order_id=str(order.id),
            order_number=order.order_number,
            status=order.status,
        )

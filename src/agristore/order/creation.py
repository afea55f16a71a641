"""Order creation: command and handler.

Used directly by back-office tools; shoppers place orders through the
checkout (see ``agristore.checkout.placement``).
"""

import json

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from agristore.domain import agristore
from agristore.order.order import Order
from agristore.shared.address import ShippingAddress
from agristore.shared.methods import payment_method_for, shipping_method_for

logger = structlog.get_logger(__name__)


@agristore.command(part_of="Order")
class CreateOrder:
    customer_id = Identifier()
    lines = Text(required=True)  # JSON: list of line dicts
    shipping_address = Text(required=True)  # JSON: address dict
    payment_method = String(required=True, max_length=50)
    account_number = String(max_length=50)
    shipping_method = String(required=True, max_length=50)
    subtotal = Integer(required=True, min_value=0)
    tax = Integer(default=0, min_value=0)
    shipping_cost = Integer(default=0, min_value=0)
    discount_amount = Integer(default=0, min_value=0)
    total = Integer(required=True, min_value=0)
    discount_code = String(max_length=50)
    notes = Text()


def _load(value):
    return json.loads(value) if isinstance(value, str) else value


@agristore.command_handler(part_of=Order)
class CreateOrderHandler:
    @handle(CreateOrder)
    def create_order(self, command):
        order = Order.create(
            lines=_load(command.lines),
            shipping_address=ShippingAddress(**_load(command.shipping_address)),
            payment_method=payment_method_for(command.payment_method, command.account_number),
            shipping_method=shipping_method_for(command.shipping_method),
            summary={
                "subtotal": command.subtotal,
                "tax": command.tax or 0,
                "shipping_cost": command.shipping_cost or 0,
                "discount_amount": command.discount_amount or 0,
                "total": command.total,
            },
            customer_id=command.customer_id,
            discount_code=command.discount_code,
            notes=command.notes,
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order created",
            order_id=str(order.id),
            order_number=order.order_number,
            total=order.total,
        )
        return str(order.id)

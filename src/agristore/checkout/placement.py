"""Order placement: turns a checkout in the review step into an Order.

Everything runs in one unit of work: if any step fails, neither the order nor
the emptied cart is persisted. The ``processing`` flag is set and cleared
inside that unit of work and is never stored as true. A repeat submission is
refused by the review-step check, because a placed checkout sits at
``complete``. ``DuplicateSubmission`` only fires for a checkout loaded with
the flag already set.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from agristore.cart.cart import Cart
from agristore.catalog.discount import lookup_discount
from agristore.checkout.checkout import Checkout
from agristore.domain import agristore
from agristore.exceptions import DuplicateSubmission, EmptyOrder
from agristore.order.order import Order
from agristore.shared.methods import shipping_method_for

logger = structlog.get_logger(__name__)

DEFAULT_SHIPPING_METHOD = "standard"


@agristore.command(part_of="Checkout")
class PlaceOrder:
    checkout_id = Identifier(required=True)
    notes = Text()


def _sync_discount(cart, code):
    """Make the checkout's discount code the cart's active one."""
    if not code or code == cart.discount_code:
        return
    cart.apply_discount(lookup_discount(code))


@agristore.command_handler(part_of=Checkout)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        checkout_repo = current_domain.repository_for(Checkout)
        checkout = checkout_repo.get(command.checkout_id)

        try:
            checkout.begin_processing()
        except DuplicateSubmission:
            logger.warning("Duplicate order submission rejected", checkout_id=str(checkout.id))
            raise

        try:
            checkout.ensure_ready_to_place()

            cart_repo = current_domain.repository_for(Cart)
            cart = cart_repo.get(checkout.cart_id)
            if cart.is_empty:
                raise EmptyOrder({"lines": ["Cannot place an order without items"]})

            _sync_discount(cart, checkout.discount_code)
            summary = cart.summary()

            order = Order.create(
                lines=[line.snapshot() for line in cart.lines],
                shipping_address=checkout.shipping_address,
                payment_method=checkout.payment_method,
                shipping_method=checkout.shipping_method or shipping_method_for(DEFAULT_SHIPPING_METHOD),
                summary=summary.to_dict(),
                customer_id=checkout.customer_id,
                discount_code=cart.discount_code,
                notes=command.notes,
            )
            current_domain.repository_for(Order).add(order)

            cart.clear()
            cart_repo.add(cart)

            checkout.complete(str(order.id))
        finally:
            checkout.end_processing()

        checkout_repo.add(checkout)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_number=order.order_number,
            checkout_id=str(checkout.id),
            total=order.total,
        )
        return str(order.id)

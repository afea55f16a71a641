"""Domain events for the Checkout aggregate."""

from protean.fields import DateTime, Identifier, String

from agristore.domain import agristore


@agristore.event(part_of="Checkout")
class CheckoutStarted:
    __version__ = 1

    checkout_id = Identifier(required=True)
    cart_id = Identifier(required=True)
    started_at = DateTime(required=True)


@agristore.event(part_of="Checkout")
class CheckoutStepChanged:
    """The checkout moved one step forward or backward."""

    __version__ = 1

    checkout_id = Identifier(required=True)
    from_step = String(required=True)
    to_step = String(required=True)


@agristore.event(part_of="Checkout")
class CheckoutCompleted:
    """An order was placed from this checkout."""

    __version__ = 1

    checkout_id = Identifier(required=True)
    order_id = Identifier(required=True)
    completed_at = DateTime(required=True)


@agristore.event(part_of="Checkout")
class CheckoutReset:
    """All selections were discarded and the checkout returned to the shipping step."""

    __version__ = 1

    checkout_id = Identifier(required=True)
    previous_step = String(required=True)

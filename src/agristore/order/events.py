"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Identifier, Integer, String, Text

from agristore.domain import agristore


@agristore.event(part_of="Order")
class OrderPlaced:
    """A new order was created from a checkout."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier()
    lines = Text(required=True)  # JSON: list of line dicts
    subtotal = Integer(required=True)
    tax = Integer(required=True)
    shipping_cost = Integer(required=True)
    discount_amount = Integer(required=True)
    total = Integer(required=True)
    payment_method = String()
    shipping_method = String()
    tracking_number = String()
    placed_at = DateTime(required=True)


@agristore.event(part_of="Order")
class OrderStatusChanged:
    """The order moved to a new lifecycle status."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    from_status = String(required=True)
    to_status = String(required=True)
    note = String()
    changed_by = String()
    changed_at = DateTime(required=True)


@agristore.event(part_of="Order")
class TrackingNumberUpdated:
    __version__ = 1

    order_id = Identifier(required=True)
    tracking_number = String(required=True)


@agristore.event(part_of="Order")
class OrderNotesUpdated:
    __version__ = 1

    order_id = Identifier(required=True)
    notes = Text()


@agristore.event(part_of="Order")
class OrderPriorityChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    from_priority = String(required=True)
    to_priority = String(required=True)

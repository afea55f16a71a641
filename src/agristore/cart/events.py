"""Domain events for the Cart aggregate."""

from protean.fields import Identifier, Integer, String

from agristore.domain import agristore


@agristore.event(part_of="Cart")
class CartLineAdded:
    """A product was added to the cart, or merged into an existing line."""

    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = String(required=True)
    product_id = Identifier(required=True)
    unit_price = Integer(required=True)
    quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@agristore.event(part_of="Cart")
class CartLineQuantityChanged:
    """The quantity of a cart line was set to a new positive value."""

    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = String(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@agristore.event(part_of="Cart")
class CartLineRemoved:
    """A line was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = String(required=True)


@agristore.event(part_of="Cart")
class CartCleared:
    """All lines and the active discount were removed, usually after an order was placed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    lines_removed = Integer(required=True)


@agristore.event(part_of="Cart")
class DiscountApplied:
    """A discount code became the cart's active discount."""

    __version__ = 1

    cart_id = Identifier(required=True)
    code = String(required=True)
    discount_type = String(required=True)
    value = Integer(required=True)
    replaced_code = String()


@agristore.event(part_of="Cart")
class DiscountRemoved:
    """The active discount code was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    code = String(required=True)

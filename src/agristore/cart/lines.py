"""Cart line management: commands and handler."""

import json

from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from agristore.cart.cart import Cart
from agristore.catalog.product import Product
from agristore.domain import agristore


@agristore.command(part_of="Cart")
class AddToCart:
    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(min_value=1, default=1)
    variants = Text()  # JSON: {attribute: value}
    options = Text()  # JSON: {attribute: value}


@agristore.command(part_of="Cart")
class SetCartLineQuantity:
    cart_id = Identifier(required=True)
    line_id = String(required=True, max_length=255)
    quantity = Integer(required=True)


@agristore.command(part_of="Cart")
class RemoveFromCart:
    cart_id = Identifier(required=True)
    line_id = String(required=True, max_length=255)


def _load_mapping(value):
    if not value:
        return None
    return json.loads(value) if isinstance(value, str) else value


@agristore.command_handler(part_of=Cart)
class ManageCartLinesHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = current_domain.repository_for(Product).get(command.product_id)
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        line_id = cart.add_line(
            product,
            quantity=command.quantity or 1,
            variants=_load_mapping(command.variants),
            options=_load_mapping(command.options),
        )
        repo.add(cart)
        return line_id

    @handle(SetCartLineQuantity)
    def set_line_quantity(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        cart.set_quantity(command.line_id, command.quantity)
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        cart.remove_line(command.line_id)
        repo.add(cart)

"""Cart discount codes: commands and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from agristore.cart.cart import Cart
from agristore.catalog.discount import lookup_discount
from agristore.domain import agristore


@agristore.command(part_of="Cart")
class ApplyDiscountCode:
    """Apply a discount code to a cart, replacing the active one."""

    cart_id = Identifier(required=True)
    code = String(required=True, max_length=50)


@agristore.command(part_of="Cart")
class RemoveDiscountCode:
    cart_id = Identifier(required=True)


@agristore.command_handler(part_of=Cart)
class CartDiscountHandler:
    @handle(ApplyDiscountCode)
    def apply_discount_code(self, command):
        discount = lookup_discount(command.code)
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        cart.apply_discount(discount)
        repo.add(cart)

    @handle(RemoveDiscountCode)
    def remove_discount_code(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        cart.remove_discount()
        repo.add(cart)

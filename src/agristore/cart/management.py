"""Cart lifecycle: create and clear commands and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from agristore.cart.cart import Cart
from agristore.domain import agristore


@agristore.command(part_of="Cart")
class CreateCart:
    customer_id = Identifier()
    session_id = String(max_length=255)


@agristore.command(part_of="Cart")
class ClearCart:
    cart_id = Identifier(required=True)


@agristore.command_handler(part_of=Cart)
class ManageCartHandler:
    @handle(CreateCart)
    def create_cart(self, command):
        cart = Cart.create(customer_id=command.customer_id, session_id=command.session_id)
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        cart.clear()
        repo.add(cart)

"""Checkout selections and step navigation: commands and handler.

Navigation handlers return whether the step changed; the field errors
recorded by a failed ``advance`` are persisted with the checkout.
"""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from agristore.cart.cart import Cart
from agristore.checkout.checkout import Checkout
from agristore.domain import agristore
from agristore.shared.address import ShippingAddress
from agristore.shared.methods import payment_method_for, shipping_method_for
from agristore.wallet.repository import wallet_for


@agristore.command(part_of="Checkout")
class StartCheckout:
    cart_id = Identifier(required=True)
    customer_id = Identifier()


@agristore.command(part_of="Checkout")
class SetShippingAddress:
    checkout_id = Identifier(required=True)
    address = Text(required=True)  # JSON object of address fields


@agristore.command(part_of="Checkout")
class SetPaymentMethod:
    checkout_id = Identifier(required=True)
    method_id = String(required=True, max_length=50)
    account_number = String(max_length=50)


@agristore.command(part_of="Checkout")
class SetShippingMethod:
    checkout_id = Identifier(required=True)
    method_id = String(required=True, max_length=50)


@agristore.command(part_of="Checkout")
class SetCheckoutDiscountCode:
    checkout_id = Identifier(required=True)
    code = String(max_length=50)


@agristore.command(part_of="Checkout")
class AdvanceCheckout:
    checkout_id = Identifier(required=True)


@agristore.command(part_of="Checkout")
class RetreatCheckout:
    checkout_id = Identifier(required=True)


@agristore.command(part_of="Checkout")
class ResetCheckout:
    checkout_id = Identifier(required=True)


@agristore.command_handler(part_of=Checkout)
class CheckoutSelectionHandler:
    @handle(StartCheckout)
    def start_checkout(self, command):
        cart = current_domain.repository_for(Cart).get(command.cart_id)
        customer_id = command.customer_id or cart.customer_id
        # Registered customers start from their default saved payment method
        payment_method = None
        if customer_id:
            default = wallet_for(customer_id).default_method
            payment_method = default.to_payment_method() if default else None
        checkout = Checkout.start(
            cart_id=command.cart_id,
            customer_id=customer_id,
            discount_code=cart.discount_code,
            payment_method=payment_method,
        )
        current_domain.repository_for(Checkout).add(checkout)
        return str(checkout.id)

    @handle(SetShippingAddress)
    def set_shipping_address(self, command):
        repo = current_domain.repository_for(Checkout)
        checkout = repo.get(command.checkout_id)
        address = json.loads(command.address) if isinstance(command.address, str) else command.address
        checkout.set_shipping_address(ShippingAddress(**address))
        repo.add(checkout)

    @handle(SetPaymentMethod)
    def set_payment_method(self, command):
        repo = current_domain.repository_for(Checkout)
        checkout = repo.get(command.checkout_id)
        checkout.set_payment_method(payment_method_for(command.method_id, command.account_number))
        repo.add(checkout)

    @handle(SetShippingMethod)
    def set_shipping_method(self, command):
        repo = current_domain.repository_for(Checkout)
        checkout = repo.get(command.checkout_id)
        checkout.set_shipping_method(shipping_method_for(command.method_id))
        repo.add(checkout)

    @handle(SetCheckoutDiscountCode)
    def set_discount_code(self, command):
        repo = current_domain.repository_for(Checkout)
        checkout = repo.get(command.checkout_id)
        checkout.set_discount_code(command.code)
        repo.add(checkout)

    @handle(AdvanceCheckout)
    def advance(self, command):
        repo = current_domain.repository_for(Checkout)
        checkout = repo.get(command.checkout_id)
        moved = checkout.advance()
        repo.add(checkout)
        return moved

    @handle(RetreatCheckout)
    def retreat(self, command):
        repo = current_domain.repository_for(Checkout)
        checkout = repo.get(command.checkout_id)
        moved = checkout.retreat()
        repo.add(checkout)
        return moved

    @handle(ResetCheckout)
    def reset(self, command):
        repo = current_domain.repository_for(Checkout)
        checkout = repo.get(command.checkout_id)
        checkout.reset()
        repo.add(checkout)

import json

import pytest
from protean import current_domain

from agristore.cart.lines import AddToCart
from agristore.cart.management import CreateCart
from agristore.checkout.selection import (
    AdvanceCheckout,
    SetPaymentMethod,
    SetShippingAddress,
    StartCheckout,
)

ARUSHA_ADDRESS = {
    "first_name": "Juma",
    "last_name": "Kassim",
    "address": "Sokoine Road 14",
    "city": "Arusha",
    "region": "Arusha",
    "phone": "0754123456",
}


def process(command):
    return current_domain.process(command, asynchronous=False)


@pytest.fixture()
def filled_cart(fertilizer):
    """A customer cart holding two bags of fertilizer (subtotal 115 000)."""
    cart_id = process(CreateCart(customer_id="cust-001"))
    process(AddToCart(cart_id=cart_id, product_id=str(fertilizer.id), quantity=2))
    return cart_id


@pytest.fixture()
def checkout_id(filled_cart):
    return process(StartCheckout(cart_id=filled_cart))


@pytest.fixture()
def reviewed_checkout(checkout_id):
    """A checkout whose address and payment were accepted, sitting at review."""
    process(SetShippingAddress(checkout_id=checkout_id, address=json.dumps(ARUSHA_ADDRESS)))
    assert process(AdvanceCheckout(checkout_id=checkout_id)) is True
    process(SetPaymentMethod(checkout_id=checkout_id, method_id="mpesa", account_number="0754123456"))
    assert process(AdvanceCheckout(checkout_id=checkout_id)) is True
    return checkout_id

import json

import pytest
from protean import current_domain

from agristore.order.creation import CreateOrder
from agristore.order.order import Order
from agristore.shared.address import ShippingAddress
from agristore.shared.methods import payment_method_for, shipping_method_for

DAR_ADDRESS = {
    "first_name": "Neema",
    "last_name": "Mushi",
    "address": "Mikocheni B, Plot 22",
    "city": "Dar es Salaam",
    "region": "Dar es Salaam",
    "phone": "+255712345678",
}

LINES = [
    {
        "line_id": "prod-npk::bag=50kg",
        "product_id": "prod-npk",
        "product_name": "NPK 17-17-17 Fertilizer",
        "supplier": "Yara Tanzania",
        "unit_price": 109500,
        "quantity": 1,
        "subtotal": 109500,
        "selected_variants": {"bag": "50kg"},
    },
    {
        "line_id": "prod-maize",
        "product_id": "prod-maize",
        "product_name": "Hybrid Maize Seed H614",
        "supplier": "Kenya Seed Company",
        "unit_price": 18000,
        "quantity": 3,
        "subtotal": 54000,
    },
]

SUMMARY = {"subtotal": 163500, "tax": 29430, "shipping_cost": 0, "discount_amount": 0, "total": 192930}


@pytest.fixture()
def new_order():
    """Factory for unsaved pending orders."""

    def _make(shipping="standard", customer_id="cust-001", address=None):
        order = Order.create(
            lines=LINES,
            shipping_address=ShippingAddress(**(address or DAR_ADDRESS)),
            payment_method=payment_method_for("airtel", "0683111222"),
            shipping_method=shipping_method_for(shipping),
            summary=SUMMARY,
            customer_id=customer_id,
        )
        order._events.clear()
        return order

    return _make


@pytest.fixture()
def placed_order_id():
    """Factory that creates an order through the CreateOrder command."""

    def _place(customer_id="cust-001", address=None, shipping="standard"):
        command = CreateOrder(
            customer_id=customer_id,
            lines=json.dumps(LINES),
            shipping_address=json.dumps(address or DAR_ADDRESS),
            payment_method="cod",
            shipping_method=shipping,
            **SUMMARY,
        )
        return current_domain.process(command, asynchronous=False)

    return _place

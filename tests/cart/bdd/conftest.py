"""Shared BDD fixtures and step definitions for the cart."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when

from agristore.cart.cart import Cart
from agristore.catalog.discount import lookup_discount
from agristore.catalog.product import Product
from agristore.catalog.seed import seed_discount_codes


@pytest.fixture()
def products():
    return {}


@pytest.fixture()
def error():
    """Container for the error raised by the last cart action."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("an empty cart", target_fixture="cart")
def empty_cart():
    cart = Cart.create(customer_id="cust-001")
    cart._events.clear()
    return cart


@given(parsers.cfparse('a product "{name}" priced at {price:d}'))
def product_priced_at(products, name, price):
    products[name] = Product.create(name=name, price=price)


@given("the default discount codes exist")
def default_discount_codes():
    seed_discount_codes()


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(
    parsers.re(r'(?P<quantity>\d+) of "(?P<name>[^"]+)" (?:are|is) added to the cart'),
    converters={"quantity": int},
)
def add_to_cart(cart, products, quantity, name):
    cart.add_line(products[name], quantity=quantity)


@when(parsers.cfparse('the quantity of "{name}" is set to {quantity:d}'))
def set_quantity(cart, products, name, quantity):
    line = cart.line_for_product(products[name].id)
    cart.set_quantity(line.line_id, quantity)


@when(parsers.cfparse('the discount code "{code}" is applied'))
def apply_discount(cart, error, code):
    try:
        cart.apply_discount(lookup_discount(code))
    except ValidationError as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the cart subtotal is {amount:d}"))
def cart_subtotal_is(cart, amount):
    assert cart.summary().subtotal == amount


@then(parsers.cfparse("the shipping cost is {amount:d}"))
def shipping_cost_is(cart, amount):
    assert cart.summary().shipping_cost == amount


@then(parsers.cfparse("the tax is {amount:d}"))
def tax_is(cart, amount):
    assert cart.summary().tax == amount


@then(parsers.cfparse("the discount amount is {amount:d}"))
def discount_amount_is(cart, amount):
    assert cart.summary().discount_amount == amount


@then(parsers.cfparse("the cart total is {amount:d}"))
def cart_total_is(cart, amount):
    assert cart.summary().total == amount


@then("the cart is empty")
def cart_is_empty(cart):
    assert cart.is_empty


@then(parsers.cfparse('the active discount code is "{code}"'))
def active_discount_code_is(cart, code):
    assert cart.discount_code == code


@then("no discount code is active")
def no_discount_code(cart):
    assert cart.discount_code is None


@then(parsers.cfparse('the cart action fails with "{error_name}"'))
def cart_action_fails(error, error_name):
    assert error["exc"] is not None, "Expected an error but none was raised"
    assert type(error["exc"]).__name__ == error_name


"""Step definitions for the checkout scenarios."""

from pytest_bdd import given, parsers, then, when

from agristore.checkout.checkout import Checkout
from agristore.shared.address import ShippingAddress
from agristore.shared.methods import payment_method_for

_COMPLETE_ADDRESS = {
    "first_name": "Juma",
    "last_name": "Kassim",
    "address": "Sokoine Road 14",
    "city": "Arusha",
    "region": "Arusha",
    "phone": "0754123456",
}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a checkout for cart "{cart_id}"'), target_fixture="checkout")
def checkout_for_cart(cart_id):
    return Checkout.start(cart_id=cart_id)


@given("a complete shipping address")
def complete_shipping_address(checkout):
    checkout.set_shipping_address(ShippingAddress(**_COMPLETE_ADDRESS))


@given(parsers.cfparse('the shipping address has no city and the phone "{phone}"'))
def address_without_city(checkout, phone):
    checkout.set_shipping_address(ShippingAddress(**{**_COMPLETE_ADDRESS, "city": None, "phone": phone}))


@given("the customer has continued")
def customer_has_continued(checkout):
    assert checkout.advance() is True


@given(parsers.cfparse('the payment method "{method_id}" without an account number'))
def payment_without_account(checkout, method_id):
    checkout.set_payment_method(payment_method_for(method_id))


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the customer continues")
def customer_continues(checkout):
    checkout.advance()


@when("the customer goes back")
def customer_goes_back(checkout):
    checkout.retreat()


@when("the checkout is reset")
def checkout_is_reset(checkout):
    checkout.reset()


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the checkout is at the "{step}" step'))
def checkout_at_step(checkout, step):
    assert checkout.step == step


@then(parsers.cfparse('the error for "{field}" is "{message}"'))
def error_for_field(checkout, field, message):
    assert checkout.error_messages[field] == message


@then("there are no errors")
def no_errors(checkout):
    assert not checkout.has_errors


@then(parsers.cfparse('the shipping city is "{city}"'))
def shipping_city_is(checkout, city):
    assert checkout.shipping_address.city == city


@then("no shipping address is selected")
def no_shipping_address(checkout):
    assert checkout.shipping_address is None

"""Application tests for turning a reviewed checkout into an Order."""

from datetime import timedelta

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from agristore.cart.cart import Cart
from agristore.cart.management import ClearCart
from agristore.checkout.checkout import Checkout, CheckoutStep
from agristore.checkout.placement import PlaceOrder
from agristore.checkout.selection import RetreatCheckout, SetCheckoutDiscountCode, SetShippingMethod
from agristore.exceptions import DuplicateSubmission, EmptyOrder
from agristore.order.order import Order, OrderStatus


def process(command):
    return current_domain.process(command, asynchronous=False)


def _checkout(checkout_id):
    return current_domain.repository_for(Checkout).get(checkout_id)


def _orders():
    return current_domain.repository_for(Order).find_all()


class TestPlaceOrder:
    def test_creates_a_pending_order(self, reviewed_checkout):
        order_id = process(PlaceOrder(checkout_id=reviewed_checkout, notes="Deliver before planting"))

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.PENDING.value
        assert order.item_count == 2
        assert order.subtotal == 115000
        assert order.tax == 20700
        assert order.shipping_cost == 0
        assert order.total == 135700
        assert order.customer_name == "Juma Kassim"
        assert order.customer_phone == "0754123456"
        assert order.notes == "Deliver before planting"
        assert [entry.note for entry in order.history] == ["Order placed successfully"]

    def test_empties_the_cart(self, filled_cart, reviewed_checkout):
        process(PlaceOrder(checkout_id=reviewed_checkout))

        assert current_domain.repository_for(Cart).get(filled_cart).is_empty

    def test_completes_the_checkout(self, reviewed_checkout):
        order_id = process(PlaceOrder(checkout_id=reviewed_checkout))

        checkout = _checkout(reviewed_checkout)
        assert checkout.step == CheckoutStep.COMPLETE.value
        assert str(checkout.order_id) == order_id
        assert checkout.processing is False

    def test_defaults_to_standard_shipping(self, reviewed_checkout):
        order_id = process(PlaceOrder(checkout_id=reviewed_checkout))

        order = current_domain.repository_for(Order).get(order_id)
        assert order.shipping_method.method_id == "standard"
        assert order.estimated_delivery - order.created_at == timedelta(days=5)

    def test_uses_the_selected_shipping_method(self, reviewed_checkout):
        process(SetShippingMethod(checkout_id=reviewed_checkout, method_id="pickup"))

        order_id = process(PlaceOrder(checkout_id=reviewed_checkout))

        order = current_domain.repository_for(Order).get(order_id)
        assert order.shipping_method.method_id == "pickup"

    def test_applies_the_checkout_discount_code(self, reviewed_checkout, discount_codes):
        process(SetCheckoutDiscountCode(checkout_id=reviewed_checkout, code="WELCOME10"))

        order_id = process(PlaceOrder(checkout_id=reviewed_checkout))

        order = current_domain.repository_for(Order).get(order_id)
        assert order.discount_code == "WELCOME10"
        assert order.discount_amount == 11500
        assert order.total == 122130


class TestPlaceOrderRefusals:
    def test_only_from_review(self, filled_cart, reviewed_checkout):
        process(RetreatCheckout(checkout_id=reviewed_checkout))

        with pytest.raises(ValidationError):
            process(PlaceOrder(checkout_id=reviewed_checkout))

        assert _orders() == []
        assert not current_domain.repository_for(Cart).get(filled_cart).is_empty

    def test_empty_cart(self, filled_cart, reviewed_checkout):
        process(ClearCart(cart_id=filled_cart))

        with pytest.raises(EmptyOrder):
            process(PlaceOrder(checkout_id=reviewed_checkout))

        assert _orders() == []

    def test_duplicate_submission(self, reviewed_checkout):
        repo = current_domain.repository_for(Checkout)
        checkout = repo.get(reviewed_checkout)
        checkout.begin_processing()
        repo.add(checkout)

        with pytest.raises(DuplicateSubmission):
            process(PlaceOrder(checkout_id=reviewed_checkout))

        assert _orders() == []

    def test_cannot_place_twice(self, reviewed_checkout):
        process(PlaceOrder(checkout_id=reviewed_checkout))
        assert _checkout(reviewed_checkout).processing is False

        with pytest.raises(ValidationError) as exc:
            process(PlaceOrder(checkout_id=reviewed_checkout))

        assert "step" in exc.value.messages
        assert len(_orders()) == 1

    def test_failed_placement_leaves_no_processing_flag(self, filled_cart, reviewed_checkout):
        process(ClearCart(cart_id=filled_cart))

        with pytest.raises(EmptyOrder):
            process(PlaceOrder(checkout_id=reviewed_checkout))

        assert _checkout(reviewed_checkout).processing is False

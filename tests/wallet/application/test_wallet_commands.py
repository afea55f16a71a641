"""Application tests for saved payment method commands and the checkout pre-fill."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from agristore.cart.lines import AddToCart
from agristore.cart.management import CreateCart
from agristore.checkout.checkout import Checkout
from agristore.checkout.selection import StartCheckout
from agristore.wallet.management import (
    DeletePaymentMethod,
    ResetPaymentWallet,
    SavePaymentMethod,
    SetDefaultPaymentMethod,
    UpdatePaymentMethod,
)
from agristore.wallet.repository import wallet_for
from agristore.wallet.wallet import PaymentWallet

CUSTOMER = "cust-wallet-001"


def process(command):
    return current_domain.process(command, asynchronous=False)


def _stored_wallet(customer_id=CUSTOMER):
    return current_domain.repository_for(PaymentWallet).find_for_customer(customer_id)


class TestWalletStorage:
    def test_no_wallet_is_stored_before_the_first_change(self):
        assert _stored_wallet() is None
        assert wallet_for(CUSTOMER).default_method.method_id == "mpesa"

    def test_save_stores_the_wallet(self):
        saved_id = process(SavePaymentMethod(customer_id=CUSTOMER, method_type="card", provider="CRDB Visa"))

        wallet = _stored_wallet()
        assert len(wallet.methods) == 5
        assert wallet.get_method(saved_id).provider == "CRDB Visa"
        assert wallet.default_method.method_id == "mpesa"

    def test_one_wallet_per_customer(self):
        process(SavePaymentMethod(customer_id=CUSTOMER, method_type="card", provider="CRDB Visa"))
        process(SavePaymentMethod(customer_id=CUSTOMER, method_type="bank", provider="NMB Bank"))

        wallets = current_domain.repository_for(PaymentWallet).query.filter(customer_id=CUSTOMER).all().items
        assert len(wallets) == 1
        assert len(wallets[0].methods) == 6

    def test_wallets_are_kept_apart(self):
        process(SavePaymentMethod(customer_id=CUSTOMER, method_type="card", provider="CRDB Visa"))

        assert _stored_wallet("cust-wallet-002") is None
        assert len(wallet_for("cust-wallet-002").methods) == 4

    def test_unknown_type_is_rejected(self):
        with pytest.raises(ValidationError):
            process(SavePaymentMethod(customer_id=CUSTOMER, method_type="barter"))
        assert _stored_wallet() is None


class TestWalletCommands:
    def test_update_catalogue_entry(self):
        process(
            UpdatePaymentMethod(
                customer_id=CUSTOMER,
                saved_method_id=f"{CUSTOMER}:mpesa",
                account_number="0754123456",
            )
        )

        assert _stored_wallet().get_method(f"{CUSTOMER}:mpesa").account_number == "0754123456"

    def test_set_default(self):
        process(SetDefaultPaymentMethod(customer_id=CUSTOMER, saved_method_id=f"{CUSTOMER}:cod"))

        assert _stored_wallet().default_method.method_id == "cod"

    def test_delete_default_promotes_next(self):
        process(DeletePaymentMethod(customer_id=CUSTOMER, saved_method_id=f"{CUSTOMER}:mpesa"))

        wallet = _stored_wallet()
        assert wallet.get_method(f"{CUSTOMER}:mpesa") is None
        assert wallet.default_method.method_id == "airtel"

    def test_delete_unknown_method(self):
        with pytest.raises(ValidationError):
            process(DeletePaymentMethod(customer_id=CUSTOMER, saved_method_id="no-such-method"))

    def test_reset_restores_deleted_catalogue_entries(self):
        saved_id = process(SavePaymentMethod(customer_id=CUSTOMER, method_type="card", provider="CRDB Visa"))
        process(DeletePaymentMethod(customer_id=CUSTOMER, saved_method_id=f"{CUSTOMER}:airtel"))
        process(SetDefaultPaymentMethod(customer_id=CUSTOMER, saved_method_id=saved_id))

        process(ResetPaymentWallet(customer_id=CUSTOMER))

        wallet = _stored_wallet()
        assert {m.method_id for m in wallet.methods} == {"mpesa", "airtel", "tigo", "cod"}
        assert wallet.get_method(saved_id) is None
        assert wallet.default_method.method_id == "mpesa"


class TestCheckoutPrefill:
    @pytest.fixture()
    def customer_cart(self, fertilizer):
        cart_id = process(CreateCart(customer_id=CUSTOMER))
        process(AddToCart(cart_id=cart_id, product_id=str(fertilizer.id), quantity=1))
        return cart_id

    def _start(self, cart_id):
        checkout_id = process(StartCheckout(cart_id=cart_id))
        return current_domain.repository_for(Checkout).get(checkout_id)

    def test_new_customer_starts_with_mpesa(self, customer_cart):
        payment_method = self._start(customer_cart).payment_method

        assert payment_method.method_id == "mpesa"
        assert payment_method.account_number is None

    def test_saved_default_is_used(self, customer_cart):
        process(
            UpdatePaymentMethod(
                customer_id=CUSTOMER,
                saved_method_id=f"{CUSTOMER}:airtel",
                account_number="0688123456",
                is_default=True,
            )
        )

        payment_method = self._start(customer_cart).payment_method

        assert payment_method.method_id == "airtel"
        assert payment_method.provider == "Airtel Money"
        assert payment_method.account_number == "0688123456"

    def test_custom_default_is_used(self, customer_cart):
        saved_id = process(
            SavePaymentMethod(
                customer_id=CUSTOMER,
                method_type="card",
                provider="CRDB Visa",
                account_number="4111",
                is_default=True,
            )
        )

        payment_method = self._start(customer_cart).payment_method

        assert payment_method.method_id == saved_id
        assert payment_method.method_type == "card"

    def test_guest_checkout_has_no_payment_method(self, fertilizer):
        cart_id = process(CreateCart(session_id="sess-guest-001"))
        process(AddToCart(cart_id=cart_id, product_id=str(fertilizer.id), quantity=1))

        assert self._start(cart_id).payment_method is None

    def test_starting_a_checkout_does_not_store_a_wallet(self, customer_cart):
        self._start(customer_cart)

        assert _stored_wallet() is None

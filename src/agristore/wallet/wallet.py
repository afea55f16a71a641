"""PaymentWallet aggregate: a customer's saved payment methods.

A new wallet holds the catalogue's mobile money providers and cash on
delivery, with M-Pesa as the default. At most one saved method is the
default, and a non-empty wallet always has one.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, Identifier, Integer, String

from agristore.domain import agristore
from agristore.shared.methods import PAYMENT_METHODS, PaymentMethod, PaymentMethodType
from agristore.wallet.events import (
    DefaultPaymentMethodChanged,
    PaymentMethodDeleted,
    PaymentMethodSaved,
    PaymentMethodUpdated,
    PaymentWalletReset,
)

DEFAULT_METHOD_ID = "mpesa"


def _method_type(value) -> str:
    try:
        return PaymentMethodType(value).value
    except ValueError:
        raise ValidationError({"method_type": [f"Unknown payment method type: {value}"]}) from None


@agristore.entity(part_of="PaymentWallet")
class SavedPaymentMethod:
    method_id = String(max_length=50)  # Catalogue entry, e.g. "mpesa"; empty for custom methods
    method_type = String(required=True, choices=PaymentMethodType)
    provider = String(max_length=100)
    account_number = String(max_length=50)
    is_default = Boolean(default=False)
    position = Integer(required=True, min_value=1)

    def to_payment_method(self) -> PaymentMethod:
        return PaymentMethod(
            method_id=self.method_id or str(self.id),
            method_type=self.method_type,
            provider=self.provider,
            account_number=self.account_number,
        )

    def to_dict(self) -> dict:
        return {
            "saved_method_id": str(self.id),
            "method_id": self.method_id,
            "method_type": self.method_type,
            "provider": self.provider,
            "account_number": self.account_number,
            "is_default": bool(self.is_default),
        }


@agristore.aggregate
class PaymentWallet:
    customer_id = Identifier(required=True, unique=True)
    methods = HasMany(SavedPaymentMethod)
    updated_at = DateTime()

    @invariant.post
    def one_default_method(self):
        if not self.methods:
            return
        defaults = [method for method in self.methods if method.is_default]
        if len(defaults) != 1:
            raise ValidationError({"methods": ["Exactly one payment method must be the default"]})

    @classmethod
    def open(cls, customer_id):
        """A wallet pre-filled with the catalogue's payment methods."""
        wallet = cls(customer_id=customer_id, updated_at=datetime.now(UTC))
        with atomic_change(wallet):
            wallet._add_catalogue_methods()
        return wallet

    def _catalogue_entry_id(self, method_id) -> str:
        return f"{self.customer_id}:{method_id}"

    def _add_catalogue_methods(self):
        for method_id, details in PAYMENT_METHODS.items():
            self.add_methods(
                SavedPaymentMethod(
                    id=self._catalogue_entry_id(method_id),
                    method_id=method_id,
                    method_type=details["method_type"],
                    provider=details["provider"],
                    is_default=method_id == DEFAULT_METHOD_ID,
                    position=self._next_position(),
                )
            )

    def _next_position(self) -> int:
        return max((method.position for method in self.methods), default=0) + 1

    # -------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------
    @property
    def ordered_methods(self) -> list:
        return sorted(self.methods, key=lambda method: method.position)

    def get_method(self, saved_method_id):
        return next((m for m in self.methods if str(m.id) == str(saved_method_id)), None)

    @property
    def default_method(self):
        return next((m for m in self.ordered_methods if m.is_default), None)

    def methods_of_type(self, method_type) -> list:
        target = _method_type(method_type)
        return [method for method in self.ordered_methods if method.method_type == target]

    def _require(self, saved_method_id):
        method = self.get_method(saved_method_id)
        if method is None:
            raise ValidationError({"saved_method_id": [f"Unknown saved payment method: {saved_method_id}"]})
        return method

    # -------------------------------------------------------------------
    # Changes
    # -------------------------------------------------------------------
    def add_method(self, method_type, provider=None, account_number=None, method_id=None, is_default=False):
        """Save a payment method and return its id. The first method saved becomes the default."""
        make_default = is_default or not self.methods
        method = SavedPaymentMethod(
            method_id=method_id,
            method_type=_method_type(method_type),
            provider=provider,
            account_number=account_number,
            is_default=False,
            position=self._next_position(),
        )
        with atomic_change(self):
            self.add_methods(method)
            if make_default:
                self._mark_default(method)
            self.updated_at = datetime.now(UTC)

        self.raise_(
            PaymentMethodSaved(
                wallet_id=str(self.id),
                customer_id=str(self.customer_id),
                saved_method_id=str(method.id),
                method_type=method.method_type,
                provider=provider,
            )
        )
        return str(method.id)

    def update_method(self, saved_method_id, provider=None, account_number=None, is_default=None):
        """Change the given details of a saved method. ``is_default=True`` also makes it the default."""
        method = self._require(saved_method_id)
        with atomic_change(self):
            if provider is not None:
                method.provider = provider
            if account_number is not None:
                method.account_number = account_number
            self.updated_at = datetime.now(UTC)

        self.raise_(PaymentMethodUpdated(wallet_id=str(self.id), saved_method_id=str(method.id)))

        if is_default:
            self.set_default(method.id)

    def delete_method(self, saved_method_id):
        """Remove a saved method. Deleting the default promotes the first remaining method."""
        method = self._require(saved_method_id)
        new_default = None
        with atomic_change(self):
            self.remove_methods(method)
            if method.is_default and self.methods:
                new_default = self.ordered_methods[0]
                new_default.is_default = True
            self.updated_at = datetime.now(UTC)

        self.raise_(
            PaymentMethodDeleted(
                wallet_id=str(self.id),
                saved_method_id=str(saved_method_id),
                new_default_id=str(new_default.id) if new_default else None,
            )
        )

    def _mark_default(self, target):
        for method in self.methods:
            method.is_default = method.id == target.id

    def set_default(self, saved_method_id):
        target = self._require(saved_method_id)
        previous = self.default_method
        if previous is not None and previous.id == target.id:
            return

        with atomic_change(self):
            self._mark_default(target)
            self.updated_at = datetime.now(UTC)

        self.raise_(
            DefaultPaymentMethodChanged(
                wallet_id=str(self.id),
                customer_id=str(self.customer_id),
                previous_default_id=str(previous.id) if previous else None,
                new_default_id=str(target.id),
            )
        )

    def reset(self):
        """Go back to the catalogue defaults, dropping every method the customer added."""
        with atomic_change(self):
            for method in list(self.methods):
                if str(method.id) != self._catalogue_entry_id(method.method_id):
                    self.remove_methods(method)

            for method_id, details in PAYMENT_METHODS.items():
                method = self.get_method(self._catalogue_entry_id(method_id))
                if method is None:
                    self.add_methods(
                        SavedPaymentMethod(
                            id=self._catalogue_entry_id(method_id),
                            method_id=method_id,
                            method_type=details["method_type"],
                            provider=details["provider"],
                            position=self._next_position(),
                        )
                    )
                    method = self.get_method(self._catalogue_entry_id(method_id))
                method.provider = details["provider"]
                method.account_number = None
                method.is_default = method_id == DEFAULT_METHOD_ID
            self.updated_at = datetime.now(UTC)

        self.raise_(PaymentWalletReset(wallet_id=str(self.id), customer_id=str(self.customer_id)))

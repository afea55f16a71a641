"""Payment and shipping method value objects, with the catalogues offered at checkout."""

from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Integer, String

from agristore.domain import agristore


class PaymentMethodType(Enum):
    MOBILE_MONEY = "mobile_money"
    CASH_ON_DELIVERY = "cash_on_delivery"
    CARD = "card"
    BANK = "bank"


@agristore.value_object
class PaymentMethod:
    """How the customer pays. Mobile money additionally needs an account number."""

    method_id = String(max_length=50)
    method_type = String(required=True, choices=PaymentMethodType)
    provider = String(max_length=100)
    account_number = String(max_length=50)

    @property
    def requires_account_number(self) -> bool:
        return PaymentMethodType(self.method_type) == PaymentMethodType.MOBILE_MONEY

    def to_dict(self) -> dict:
        return {
            "method_id": self.method_id,
            "method_type": self.method_type,
            "provider": self.provider,
            "account_number": self.account_number,
        }


@agristore.value_object
class ShippingMethod:
    """A delivery option with its fee and the number of days in transit."""

    method_id = String(required=True, max_length=50)
    name = String(max_length=100)
    description = String(max_length=255)
    price = Integer(default=0, min_value=0)
    transit_days = Integer(default=0, min_value=0)

    def to_dict(self) -> dict:
        return {
            "method_id": self.method_id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "transit_days": self.transit_days,
        }


SHIPPING_METHODS = {
    "standard": {
        "name": "Standard Delivery",
        "description": "Delivery within 3-5 business days",
        "price": 5000,
        "transit_days": 5,
    },
    "express": {
        "name": "Express Delivery",
        "description": "Delivery within 1-2 business days",
        "price": 10000,
        "transit_days": 2,
    },
    "pickup": {
        "name": "Store Pickup",
        "description": "Pick up from our store location",
        "price": 0,
        "transit_days": 0,
    },
}

PAYMENT_METHODS = {
    "mpesa": {"method_type": PaymentMethodType.MOBILE_MONEY.value, "provider": "M-Pesa"},
    "airtel": {"method_type": PaymentMethodType.MOBILE_MONEY.value, "provider": "Airtel Money"},
    "tigo": {"method_type": PaymentMethodType.MOBILE_MONEY.value, "provider": "Tigo Pesa"},
    "cod": {"method_type": PaymentMethodType.CASH_ON_DELIVERY.value, "provider": "Cash on Delivery"},
}


def shipping_method_for(method_id: str) -> ShippingMethod:
    """Build the ShippingMethod offered under ``method_id``."""
    if method_id not in SHIPPING_METHODS:
        raise ValidationError({"shipping_method": [f"Unknown shipping method: {method_id}"]})
    return ShippingMethod(method_id=method_id, **SHIPPING_METHODS[method_id])


def payment_method_for(method_id: str, account_number: str | None = None) -> PaymentMethod:
    """Build the PaymentMethod offered under ``method_id``."""
    if method_id not in PAYMENT_METHODS:
        raise ValidationError({"payment_method": [f"Unknown payment method: {method_id}"]})
    return PaymentMethod(method_id=method_id, account_number=account_number, **PAYMENT_METHODS[method_id])

"""ShippingAddress value object and regional phone number validation."""

import re

from protean.fields import String

from agristore.domain import agristore

# Tanzanian mobile numbers: +255 or 0, then 6/7 and eight more digits
_PHONE_PATTERN = re.compile(r"^(\+255|0)[67]\d{8}$")


def normalize_phone(phone: str) -> str:
    return re.sub(r"\s", "", phone or "")


def is_valid_phone(phone: str) -> bool:
    return bool(_PHONE_PATTERN.match(normalize_phone(phone)))


@agristore.value_object
class ShippingAddress:
    """A delivery address as entered at checkout.

    Every field is optional. Completeness is checked when the checkout leaves
    the shipping step, and ``validation_errors`` lists each missing field.
    """

    first_name = String(max_length=100)
    last_name = String(max_length=100)
    company = String(max_length=255)
    address = String(max_length=255)
    apartment = String(max_length=100)
    city = String(max_length=100)
    region = String(max_length=100)
    postal_code = String(max_length=20)
    country = String(max_length=100, default="Tanzania")
    phone = String(max_length=20)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def validation_errors(self) -> dict:
        """Return ``{field: message}`` for every missing or malformed field."""
        errors = {}
        required = {
            "first_name": "First name is required",
            "last_name": "Last name is required",
            "address": "Address is required",
            "city": "City is required",
            "region": "Region is required",
        }
        for field_name, message in required.items():
            if not (getattr(self, field_name) or "").strip():
                errors[field_name] = message

        if not (self.phone or "").strip():
            errors["phone"] = "Phone number is required"
        elif not is_valid_phone(self.phone):
            errors["phone"] = "Please enter a valid Tanzanian phone number"

        return errors

    def to_dict(self) -> dict:
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "company": self.company,
            "address": self.address,
            "apartment": self.apartment,
            "city": self.city,
            "region": self.region,
            "postal_code": self.postal_code,
            "country": self.country,
            "phone": self.phone,
        }

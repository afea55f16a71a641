"""Tests for the ShippingAddress value object and phone validation."""

from agristore.shared.address import ShippingAddress, is_valid_phone, normalize_phone


def _valid_address(**overrides):
    data = {
        "first_name": "Asha",
        "last_name": "Mwakyusa",
        "address": "Plot 12, Mbezi Beach",
        "city": "Dar es Salaam",
        "region": "Dar es Salaam",
        "phone": "+255712345678",
    }
    data.update(overrides)
    return ShippingAddress(**data)


class TestPhoneValidation:
    def test_international_format(self):
        assert is_valid_phone("+255712345678")

    def test_local_format(self):
        assert is_valid_phone("0612345678")

    def test_whitespace_is_ignored(self):
        assert is_valid_phone("+255 712 345 678")
        assert normalize_phone(" 0712 345 678 ") == "0712345678"

    def test_wrong_prefix(self):
        assert not is_valid_phone("+254712345678")

    def test_wrong_operator_digit(self):
        assert not is_valid_phone("0812345678")

    def test_too_short(self):
        assert not is_valid_phone("071234567")


class TestShippingAddress:
    def test_full_name(self):
        assert _valid_address().full_name == "Asha Mwakyusa"

    def test_country_defaults_to_tanzania(self):
        assert _valid_address().country == "Tanzania"

    def test_valid_address_has_no_errors(self):
        assert _valid_address().validation_errors() == {}

    def test_every_missing_field_is_reported(self):
        errors = ShippingAddress().validation_errors()
        assert errors == {
            "first_name": "First name is required",
            "last_name": "Last name is required",
            "address": "Address is required",
            "city": "City is required",
            "region": "Region is required",
            "phone": "Phone number is required",
        }

    def test_blank_values_count_as_missing(self):
        errors = _valid_address(city="   ").validation_errors()
        assert errors == {"city": "City is required"}

    def test_malformed_phone(self):
        errors = _valid_address(phone="12345").validation_errors()
        assert errors == {"phone": "Please enter a valid Tanzanian phone number"}

    def test_to_dict(self):
        data = _valid_address(apartment="Block B").to_dict()
        assert data["apartment"] == "Block B"
        assert data["phone"] == "+255712345678"

"""Tests for the DiscountCode aggregate."""

import pytest
from protean.exceptions import ValidationError

from agristore.catalog.discount import DiscountCode, DiscountType, discount_amount


class TestDiscountCodeCreation:
    def test_code_is_upper_cased(self):
        code = DiscountCode.create(" welcome10 ", DiscountType.PERCENTAGE.value, 10, 50000)
        assert code.code == "WELCOME10"

    def test_active_by_default(self):
        code = DiscountCode.create("SAVE5000", DiscountType.FIXED.value, 5000)
        assert code.is_active is True
        assert code.minimum_amount == 0

    def test_percentage_above_hundred_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            DiscountCode.create("TOOMUCH", DiscountType.PERCENTAGE.value, 150)
        assert "value" in exc.value.messages


class TestDiscountAmount:
    def test_percentage(self):
        assert discount_amount(DiscountType.PERCENTAGE.value, 10, 115000) == 11500

    def test_fixed(self):
        assert discount_amount(DiscountType.FIXED.value, 5000, 30000) == 5000

    def test_capped_at_subtotal(self):
        assert discount_amount(DiscountType.FIXED.value, 5000, 3000) == 3000

    def test_empty_subtotal(self):
        assert discount_amount(DiscountType.PERCENTAGE.value, 20, 0) == 0

    def test_amount_for(self):
        code = DiscountCode.create("FARMER20", DiscountType.PERCENTAGE.value, 20, 100000)
        assert code.amount_for(120000) == 24000

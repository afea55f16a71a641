"""DiscountCode aggregate and the case-insensitive catalogue lookup used by carts."""

from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, Integer, String
from protean.utils.globals import current_domain

from agristore.domain import agristore
from agristore.exceptions import InvalidCode
from agristore.shared.money import percentage_of


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


@agristore.aggregate
class DiscountCode:
    """A promotional code. Codes are stored upper-case and matched case-insensitively."""

    code = String(required=True, max_length=50, unique=True)
    discount_type = String(required=True, choices=DiscountType)
    value = Integer(required=True, min_value=0)
    minimum_amount = Integer(default=0, min_value=0)
    is_active = Boolean(default=True)

    @invariant.post
    def percentage_cannot_exceed_hundred(self):
        if self.discount_type == DiscountType.PERCENTAGE.value and self.value > 100:
            raise ValidationError({"value": ["Percentage discounts cannot exceed 100"]})

    @classmethod
    def create(cls, code, discount_type, value, minimum_amount=0):
        return cls(
            code=code.strip().upper(),
            discount_type=discount_type,
            value=value,
            minimum_amount=minimum_amount or 0,
        )

    def amount_for(self, subtotal: int) -> int:
        """Discount this code grants on ``subtotal``, never more than the subtotal itself."""
        return discount_amount(self.discount_type, self.value, subtotal)


def discount_amount(discount_type, value, subtotal: int) -> int:
    if DiscountType(discount_type) == DiscountType.PERCENTAGE:
        amount = percentage_of(subtotal, value)
    else:
        amount = value
    return max(0, min(amount, subtotal))


@agristore.repository(part_of=DiscountCode)
class DiscountCodeRepository:
    def find_by_code(self, code: str) -> DiscountCode | None:
        """Active discount code matching ``code`` regardless of case, or None."""
        normalized = (code or "").strip().upper()
        if not normalized:
            return None
        results = self._dao.query.filter(code=normalized, is_active=True).all().items
        return results[0] if results else None


def lookup_discount(code: str) -> DiscountCode:
    """Resolve ``code`` against the catalogue, raising InvalidCode when unknown."""
    discount = current_domain.repository_for(DiscountCode).find_by_code(code)
    if discount is None:
        raise InvalidCode({"discount_code": ["Invalid discount code"]})
    return discount

"""Cart aggregate: the lines a shopper intends to buy and their monetary summary.

A line is keyed by product id plus the selected variants and options, so adding
the same selection twice merges quantities. The unit price is captured when the
line is first added and never re-derived from the catalogue afterwards.

The summary is recomputed from the lines and the active discount on every
call; nothing derived is stored on the aggregate.
"""

import hashlib
import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text

from agristore import config
from agristore.cart.events import (
    CartCleared,
    CartLineAdded,
    CartLineQuantityChanged,
    CartLineRemoved,
    DiscountApplied,
    DiscountRemoved,
)
from agristore.catalog.discount import DiscountType, discount_amount
from agristore.domain import agristore
from agristore.exceptions import BelowMinimum
from agristore.shared.money import calculate_tax, format_currency


def line_key(product_id, variants=None, options=None) -> str:
    """Deterministic line identifier; insensitive to the order of variant/option keys."""
    payload = json.dumps([variants or {}, options or {}], sort_keys=True)
    digest = hashlib.blake2b(payload.encode("utf-8"), digest_size=6).hexdigest()
    return f"{product_id}-{digest}"


@dataclass(frozen=True)
class CartSummary:
    item_count: int
    subtotal: int
    tax: int
    shipping_cost: int
    discount_amount: int
    total: int

    def to_dict(self) -> dict:
        return asdict(self)


@agristore.entity(part_of="Cart")
class CartLine:
    line_id = String(required=True, max_length=255)
    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    supplier = String(max_length=255)
    image_url = String(max_length=1000)
    unit_price = Integer(required=True, min_value=0)
    quantity = Integer(required=True, min_value=1)
    selected_variants = Text()  # JSON object
    selected_options = Text()  # JSON object
    added_at = DateTime()

    @property
    def subtotal(self) -> int:
        return self.unit_price * self.quantity

    @property
    def variants(self) -> dict:
        return json.loads(self.selected_variants) if self.selected_variants else {}

    @property
    def options(self) -> dict:
        return json.loads(self.selected_options) if self.selected_options else {}

    def snapshot(self) -> dict:
        """Plain copy of the line, used when the cart is converted into an order."""
        return {
            "line_id": self.line_id,
            "product_id": str(self.product_id),
            "product_name": self.product_name,
            "supplier": self.supplier,
            "image_url": self.image_url,
            "unit_price": self.unit_price,
            "quantity": self.quantity,
            "subtotal": self.subtotal,
            "selected_variants": self.variants,
            "selected_options": self.options,
        }


@agristore.aggregate
class Cart:
    customer_id = Identifier()  # Nullable for guest carts
    session_id = String(max_length=255)
    lines = HasMany(CartLine)
    discount_code = String(max_length=50)
    discount_type = String(choices=DiscountType)
    discount_value = Integer(min_value=0)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id=None, session_id=None):
        now = datetime.now(UTC)
        return cls(
            customer_id=customer_id,
            session_id=session_id,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------
    def get_line(self, line_id):
        return next((line for line in self.lines if line.line_id == line_id), None)

    def line_for_product(self, product_id):
        return next((line for line in self.lines if str(line.product_id) == str(product_id)), None)

    def contains_product(self, product_id) -> bool:
        return self.line_for_product(product_id) is not None

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def subtotal(self) -> int:
        return sum(line.subtotal for line in self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def add_line(self, product, quantity=1, variants=None, options=None):
        """Add ``quantity`` of a product selection, merging into an existing line if present.

        Quantities below one are clamped to one.
        """
        quantity = max(1, int(quantity or 1))
        key = line_key(product.id, variants, options)
        existing = self.get_line(key)
        now = datetime.now(UTC)

        if existing:
            existing.quantity += quantity
            line = existing
        else:
            unit_price = product.price_for(variants)
            line = CartLine(
                line_id=key,
                product_id=str(product.id),
                product_name=product.name,
                supplier=product.supplier,
                image_url=product.image_url,
                unit_price=unit_price,
                quantity=quantity,
                selected_variants=json.dumps(variants or {}, sort_keys=True),
                selected_options=json.dumps(options or {}, sort_keys=True),
                added_at=now,
            )
            self.add_lines(line)

        self.updated_at = now

        self.raise_(
            CartLineAdded(
                cart_id=str(self.id),
                line_id=key,
                product_id=str(product.id),
                unit_price=line.unit_price,
                quantity=quantity,
                new_quantity=line.quantity,
            )
        )
        return key

    def remove_line(self, line_id):
        """Remove a line. Removing a line that is not in the cart does nothing."""
        line = self.get_line(line_id)
        if line is None:
            return

        self.remove_lines(line)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartLineRemoved(cart_id=str(self.id), line_id=line_id))

    def set_quantity(self, line_id, quantity):
        """Set a line's quantity; zero or less removes the line."""
        if quantity <= 0:
            self.remove_line(line_id)
            return

        line = self.get_line(line_id)
        if line is None:
            return

        previous_quantity = line.quantity
        line.quantity = quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartLineQuantityChanged(
                cart_id=str(self.id),
                line_id=line_id,
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def clear(self):
        """Empty the cart and drop any active discount."""
        lines_removed = len(self.lines)
        for line in list(self.lines):
            self.remove_lines(line)
        self.discount_code = None
        self.discount_type = None
        self.discount_value = None
        self.updated_at = datetime.now(UTC)

        self.raise_(CartCleared(cart_id=str(self.id), lines_removed=lines_removed))

    # -------------------------------------------------------------------
    # Discounts
    # -------------------------------------------------------------------
    def apply_discount(self, discount):
        """Make ``discount`` (a DiscountCode) the active discount, replacing any previous one.

        The minimum amount is checked only here; a cart that later shrinks below
        it keeps the discount.
        """
        subtotal = self.subtotal
        if discount.minimum_amount and subtotal < discount.minimum_amount:
            raise BelowMinimum(
                {"discount_code": [f"Minimum order amount is {format_currency(discount.minimum_amount)}"]}
            )

        replaced_code = self.discount_code
        self.discount_code = discount.code
        self.discount_type = discount.discount_type
        self.discount_value = discount.value
        self.updated_at = datetime.now(UTC)

        self.raise_(
            DiscountApplied(
                cart_id=str(self.id),
                code=discount.code,
                discount_type=discount.discount_type,
                value=discount.value,
                replaced_code=replaced_code,
            )
        )

    def remove_discount(self):
        code = self.discount_code
        if code is None:
            return

        self.discount_code = None
        self.discount_type = None
        self.discount_value = None
        self.updated_at = datetime.now(UTC)

        self.raise_(DiscountRemoved(cart_id=str(self.id), code=code))

    # -------------------------------------------------------------------
    # Summary
    # -------------------------------------------------------------------
    @property
    def discount_amount(self) -> int:
        if not self.discount_code:
            return 0
        return discount_amount(self.discount_type, self.discount_value or 0, self.subtotal)

    def summary(self) -> CartSummary:
        subtotal = self.subtotal
        discount = self.discount_amount
        shipping_cost = 0 if subtotal >= config.FREE_SHIPPING_THRESHOLD else config.SHIPPING_FEE
        tax = calculate_tax(subtotal - discount)
        total = subtotal + tax + shipping_cost - discount

        return CartSummary(
            item_count=self.item_count,
            subtotal=subtotal,
            tax=tax,
            shipping_cost=shipping_cost,
            discount_amount=discount,
            total=max(0, total),
        )

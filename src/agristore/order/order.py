"""Order aggregate: a placed purchase and its status lifecycle.

State machine:
    pending -> confirmed -> processing -> shipped -> delivered
    pending | confirmed -> cancelled
    delivered and cancelled are terminal.

Every status change appends a StatusHistoryEntry, so the history always ends
at the current status. Money amounts are frozen at creation and never
recomputed afterwards.
"""

import json
import random
import string
import time
from datetime import UTC, datetime, timedelta
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text, ValueObject

from agristore import config
from agristore.domain import agristore
from agristore.exceptions import EmptyOrder, IllegalTransition
from agristore.order.events import (
    OrderNotesUpdated,
    OrderPlaced,
    OrderPriorityChanged,
    OrderStatusChanged,
    TrackingNumberUpdated,
)
from agristore.shared.address import ShippingAddress
from agristore.shared.methods import PaymentMethod, ShippingMethod


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class OrderPriority(Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

_ALPHANUMERIC = string.ascii_uppercase + string.digits


def generate_order_number() -> str:
    """``AG`` + last six digits of the epoch millis + three random characters."""
    millis = str(int(time.time() * 1000))
    return f"{config.ORDER_NUMBER_PREFIX}{millis[-6:]}{''.join(random.choices(_ALPHANUMERIC, k=3))}"


def generate_tracking_number() -> str:
    millis = int(time.time() * 1000)
    return f"{config.TRACKING_NUMBER_PREFIX}{millis}{''.join(random.choices(_ALPHANUMERIC, k=6))}"


def allowed_transitions(status) -> set:
    return _VALID_TRANSITIONS.get(OrderStatus(status), set())


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@agristore.entity(part_of="Order")
class OrderLine:
    """A cart line frozen into the order."""

    line_id = String(required=True, max_length=255)
    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    supplier = String(max_length=255)
    image_url = String(max_length=1000)
    unit_price = Integer(required=True, min_value=0)
    quantity = Integer(required=True, min_value=1)
    subtotal = Integer(required=True, min_value=0)
    selected_variants = Text()  # JSON object
    selected_options = Text()  # JSON object

    def to_dict(self) -> dict:
        return {
            "line_id": self.line_id,
            "product_id": str(self.product_id),
            "product_name": self.product_name,
            "supplier": self.supplier,
            "image_url": self.image_url,
            "unit_price": self.unit_price,
            "quantity": self.quantity,
            "subtotal": self.subtotal,
            "selected_variants": json.loads(self.selected_variants) if self.selected_variants else {},
            "selected_options": json.loads(self.selected_options) if self.selected_options else {},
        }


@agristore.entity(part_of="Order")
class StatusHistoryEntry:
    status = String(required=True, choices=OrderStatus)
    note = String(max_length=500)
    created_by = String(max_length=100, default="system")
    changed_at = DateTime(required=True)
    sequence = Integer(required=True, min_value=1)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@agristore.aggregate
class Order:
    order_number = String(required=True, max_length=50, unique=True)
    customer_id = Identifier()
    customer_name = String(max_length=255)
    customer_phone = String(max_length=20)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    priority = String(choices=OrderPriority, default=OrderPriority.NORMAL.value)
    lines = HasMany(OrderLine)
    status_history = HasMany(StatusHistoryEntry)
    subtotal = Integer(default=0, min_value=0)
    tax = Integer(default=0, min_value=0)
    shipping_cost = Integer(default=0, min_value=0)
    discount_amount = Integer(default=0, min_value=0)
    total = Integer(default=0, min_value=0)
    shipping_address = ValueObject(ShippingAddress)
    payment_method = ValueObject(PaymentMethod)
    shipping_method = ValueObject(ShippingMethod)
    discount_code = String(max_length=50)
    notes = Text()
    tracking_number = String(max_length=100)
    estimated_delivery = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def history_must_end_at_current_status(self):
        if not self.status_history:
            return
        if self.history[-1].status != self.status:
            raise ValidationError({"status_history": ["Status history must end at the current status"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        lines,
        shipping_address,
        payment_method,
        shipping_method,
        summary,
        customer_id=None,
        discount_code=None,
        notes=None,
    ):
        """Create a pending order from a snapshot of cart lines.

        Args:
            lines: List of line dicts as produced by ``CartLine.snapshot()``.
            shipping_address: ShippingAddress value object.
            payment_method: PaymentMethod value object.
            shipping_method: ShippingMethod value object.
            summary: Dict with subtotal, tax, shipping_cost, discount_amount, total.
        """
        if not lines:
            raise EmptyOrder({"lines": ["Cannot place an order without items"]})

        now = datetime.now(UTC)
        order = cls(
            order_number=generate_order_number(),
            customer_id=customer_id,
            customer_name=shipping_address.full_name if shipping_address else None,
            customer_phone=shipping_address.phone if shipping_address else None,
            status=OrderStatus.PENDING.value,
            priority=OrderPriority.NORMAL.value,
            subtotal=summary["subtotal"],
            tax=summary["tax"],
            shipping_cost=summary["shipping_cost"],
            discount_amount=summary["discount_amount"],
            total=summary["total"],
            shipping_address=shipping_address,
            payment_method=payment_method,
            shipping_method=shipping_method,
            discount_code=discount_code,
            notes=notes,
            tracking_number=generate_tracking_number(),
            estimated_delivery=now + timedelta(days=shipping_method.transit_days or 0),
            created_at=now,
            updated_at=now,
        )

        with atomic_change(order):
            for line in lines:
                order.add_lines(
                    OrderLine(
                        line_id=line["line_id"],
                        product_id=line["product_id"],
                        product_name=line.get("product_name"),
                        supplier=line.get("supplier"),
                        image_url=line.get("image_url"),
                        unit_price=line["unit_price"],
                        quantity=line["quantity"],
                        subtotal=line["subtotal"],
                        selected_variants=json.dumps(line.get("selected_variants") or {}, sort_keys=True),
                        selected_options=json.dumps(line.get("selected_options") or {}, sort_keys=True),
                    )
                )
            order._record_history(OrderStatus.PENDING, "Order placed successfully", "system", now)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                customer_id=str(customer_id) if customer_id else None,
                lines=json.dumps([line.to_dict() for line in order.lines]),
                subtotal=order.subtotal,
                tax=order.tax,
                shipping_cost=order.shipping_cost,
                discount_amount=order.discount_amount,
                total=order.total,
                payment_method=payment_method.method_id if payment_method else None,
                shipping_method=shipping_method.method_id,
                tracking_number=order.tracking_number,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------
    @property
    def history(self) -> list:
        """Status history, oldest first."""
        return sorted(self.status_history, key=lambda entry: entry.sequence)

    def _record_history(self, status, note, created_by, changed_at):
        self.add_status_history(
            StatusHistoryEntry(
                status=status.value,
                note=note,
                created_by=created_by,
                changed_at=changed_at,
                sequence=len(self.status_history) + 1,
            )
        )

    # -------------------------------------------------------------------
    # Status lifecycle
    # -------------------------------------------------------------------
    def can_transition_to(self, new_status) -> bool:
        try:
            target = OrderStatus(new_status.value if isinstance(new_status, OrderStatus) else new_status)
        except ValueError:
            return False
        return target in allowed_transitions(self.status)

    def transition(self, new_status, note=None, changed_by="admin"):
        """Move the order to ``new_status``, appending a history entry."""
        current = OrderStatus(self.status)
        try:
            target = OrderStatus(new_status.value if isinstance(new_status, OrderStatus) else new_status)
        except ValueError:
            raise IllegalTransition({"status": [f"Unknown order status: {new_status}"]}) from None

        if target not in _VALID_TRANSITIONS[current]:
            raise IllegalTransition({"status": [f"Cannot transition from {current.value} to {target.value}"]})

        note = note or f"Order status updated to {target.value}"
        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = target.value
            self._record_history(target, note, changed_by, now)
            self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                from_status=current.value,
                to_status=target.value,
                note=note,
                changed_by=changed_by,
                changed_at=now,
            )
        )

    def cancel(self, note=None, changed_by="customer"):
        self.transition(OrderStatus.CANCELLED, note=note or "Order cancelled by customer", changed_by=changed_by)

    @property
    def is_terminal(self) -> bool:
        return not allowed_transitions(self.status)

    # -------------------------------------------------------------------
    # Administration
    # -------------------------------------------------------------------
    def update_tracking(self, tracking_number):
        if not (tracking_number or "").strip():
            raise ValidationError({"tracking_number": ["Tracking number is required"]})

        self.tracking_number = tracking_number.strip()
        self.updated_at = datetime.now(UTC)

        self.raise_(TrackingNumberUpdated(order_id=str(self.id), tracking_number=self.tracking_number))

    def update_notes(self, notes):
        self.notes = notes
        self.updated_at = datetime.now(UTC)

        self.raise_(OrderNotesUpdated(order_id=str(self.id), notes=notes))

    def set_priority(self, priority):
        try:
            target = OrderPriority(priority)
        except ValueError:
            raise ValidationError({"priority": [f"Unknown priority: {priority}"]}) from None

        previous = self.priority
        if previous == target.value:
            return

        self.priority = target.value
        self.updated_at = datetime.now(UTC)

        self.raise_(
            OrderPriorityChanged(
                order_id=str(self.id),
                from_priority=previous,
                to_priority=target.value,
            )
        )

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

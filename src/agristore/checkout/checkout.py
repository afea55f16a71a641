"""Checkout aggregate: the step-by-step state machine that turns a cart into an order.

Steps run ``shipping -> payment -> review -> complete``. Leaving a step
validates the data it collects. Failures are recorded per field on the
aggregate instead of being raised, and the step does not change.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String, Text, ValueObject

from agristore.checkout.events import (
    CheckoutCompleted,
    CheckoutReset,
    CheckoutStarted,
    CheckoutStepChanged,
)
from agristore.domain import agristore
from agristore.exceptions import DuplicateSubmission
from agristore.shared.address import ShippingAddress
from agristore.shared.methods import PaymentMethod, ShippingMethod


class CheckoutStep(Enum):
    SHIPPING = "shipping"
    PAYMENT = "payment"
    REVIEW = "review"
    COMPLETE = "complete"


_NEXT_STEP = {
    CheckoutStep.SHIPPING: CheckoutStep.PAYMENT,
    CheckoutStep.PAYMENT: CheckoutStep.REVIEW,
    CheckoutStep.REVIEW: CheckoutStep.COMPLETE,
}

_PREVIOUS_STEP = {
    CheckoutStep.PAYMENT: CheckoutStep.SHIPPING,
    CheckoutStep.REVIEW: CheckoutStep.PAYMENT,
    CheckoutStep.COMPLETE: CheckoutStep.REVIEW,
}

# Error keys owned by each selection; setting the selection clears them
_ADDRESS_ERROR_KEYS = ("shipping_address", "first_name", "last_name", "address", "city", "region", "phone")
_PAYMENT_ERROR_KEYS = ("payment_method", "account_number")
_SHIPPING_METHOD_ERROR_KEYS = ("shipping_method",)


@agristore.aggregate
class Checkout:
    cart_id = Identifier(required=True)
    customer_id = Identifier()
    step = String(choices=CheckoutStep, default=CheckoutStep.SHIPPING.value)
    shipping_address = ValueObject(ShippingAddress)
    payment_method = ValueObject(PaymentMethod)
    shipping_method = ValueObject(ShippingMethod)
    discount_code = String(max_length=50)
    processing = Boolean(default=False)
    field_errors = Text()  # JSON: {field: message}
    order_id = Identifier()
    started_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def start(cls, cart_id, customer_id=None, discount_code=None, payment_method=None):
        now = datetime.now(UTC)
        checkout = cls(
            cart_id=cart_id,
            customer_id=customer_id,
            step=CheckoutStep.SHIPPING.value,
            discount_code=discount_code,
            payment_method=payment_method,
            processing=False,
            field_errors=json.dumps({}),
            started_at=now,
            updated_at=now,
        )
        checkout.raise_(
            CheckoutStarted(
                checkout_id=str(checkout.id),
                cart_id=str(cart_id),
                started_at=now,
            )
        )
        return checkout

    # -------------------------------------------------------------------
    # Errors
    # -------------------------------------------------------------------
    @property
    def error_messages(self) -> dict:
        return json.loads(self.field_errors) if self.field_errors else {}

    @property
    def has_errors(self) -> bool:
        return bool(self.error_messages)

    def _record_errors(self, errors):
        self.field_errors = json.dumps(errors, sort_keys=True)

    def _clear_errors(self, keys):
        errors = self.error_messages
        for key in keys:
            errors.pop(key, None)
        self._record_errors(errors)

    # -------------------------------------------------------------------
    # Selections
    # -------------------------------------------------------------------
    def set_shipping_address(self, address):
        self.shipping_address = address
        self._clear_errors(_ADDRESS_ERROR_KEYS)
        self.updated_at = datetime.now(UTC)

    def set_payment_method(self, method):
        self.payment_method = method
        self._clear_errors(_PAYMENT_ERROR_KEYS)
        self.updated_at = datetime.now(UTC)

    def set_shipping_method(self, method):
        self.shipping_method = method
        self._clear_errors(_SHIPPING_METHOD_ERROR_KEYS)
        self.updated_at = datetime.now(UTC)

    def set_discount_code(self, code):
        self.discount_code = code.strip().upper() if code else None
        self._clear_errors(("discount_code",))
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------
    def shipping_errors(self) -> dict:
        if self.shipping_address is None:
            return {"shipping_address": "Shipping address is required"}
        return self.shipping_address.validation_errors()

    def payment_errors(self) -> dict:
        if self.payment_method is None:
            return {"payment_method": "Payment method is required"}
        if self.payment_method.requires_account_number and not (self.payment_method.account_number or "").strip():
            return {"account_number": "Mobile money number is required"}
        return {}

    def _errors_for(self, step) -> dict:
        if step == CheckoutStep.SHIPPING:
            return self.shipping_errors()
        if step == CheckoutStep.PAYMENT:
            return self.payment_errors()
        if step == CheckoutStep.REVIEW and not self.order_id:
            return {"order": "Place the order to complete checkout"}
        return {}

    # -------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------
    def _move_to(self, target):
        current = self.step
        self.step = target.value
        self._record_errors({})
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CheckoutStepChanged(
                checkout_id=str(self.id),
                from_step=current,
                to_step=target.value,
            )
        )

    def advance(self) -> bool:
        """Validate the current step and move to the next one.

        Returns ``False`` (and records the field errors) when validation fails
        or there is no next step.
        """
        current = CheckoutStep(self.step)
        if current not in _NEXT_STEP:
            return False

        errors = self._errors_for(current)
        if errors:
            self._record_errors(errors)
            self.updated_at = datetime.now(UTC)
            return False

        self._move_to(_NEXT_STEP[current])
        return True

    def retreat(self) -> bool:
        current = CheckoutStep(self.step)
        if current not in _PREVIOUS_STEP:
            return False

        self._move_to(_PREVIOUS_STEP[current])
        return True

    def reset(self):
        """Drop every selection and return to the shipping step."""
        previous_step = self.step
        self.step = CheckoutStep.SHIPPING.value
        self.shipping_address = None
        self.payment_method = None
        self.shipping_method = None
        self.discount_code = None
        self.processing = False
        self.order_id = None
        self._record_errors({})
        self.updated_at = datetime.now(UTC)

        self.raise_(CheckoutReset(checkout_id=str(self.id), previous_step=previous_step))

    # -------------------------------------------------------------------
    # Order placement
    # -------------------------------------------------------------------
    def begin_processing(self):
        """Mark an order submission as in flight. A second submission is refused."""
        if self.processing:
            raise DuplicateSubmission({"checkout": ["An order is already being placed for this checkout"]})
        self.processing = True

    def end_processing(self):
        self.processing = False

    def ensure_ready_to_place(self):
        """Raise if the checkout cannot be turned into an order in its current state."""
        if CheckoutStep(self.step) != CheckoutStep.REVIEW:
            raise ValidationError({"step": ["Orders can only be placed from the review step"]})

        errors = {**self.shipping_errors(), **self.payment_errors()}
        if errors:
            raise ValidationError({field: [message] for field, message in errors.items()})

    def complete(self, order_id):
        """Attach the placed order and move on to the complete step."""
        self.order_id = order_id
        completed = self.advance()
        if not completed:
            raise ValidationError({"step": ["Checkout could not be completed"]})

        self.raise_(
            CheckoutCompleted(
                checkout_id=str(self.id),
                order_id=str(order_id),
                completed_at=datetime.now(UTC),
            )
        )

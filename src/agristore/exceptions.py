"""Domain errors raised by the cart, checkout and order aggregates.

All errors carry a ``{field: [message, ...]}`` dict in ``messages``.
"""

from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError


class InvalidCode(ValidationError):
    """The discount code does not exist in the catalogue."""


class BelowMinimum(ValidationError):
    """The cart subtotal is below the discount code's minimum amount."""


class EmptyOrder(ValidationError):
    """An order was requested without any lines."""


class IllegalTransition(ValidationError):
    """The requested order status is not reachable from the current status."""


class OrderNotFound(ObjectNotFoundError):
    """No order exists with the given identifier or order number."""


class DuplicateSubmission(InvalidOperationError):
    """An order submission was attempted while another one is in flight."""

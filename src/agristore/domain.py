"""AgriStore ordering context: shopping cart, checkout and order lifecycle.

Products and discount codes are read-only catalogues from the cart's point of
view. The cart converts into an Order through the checkout state machine.
"""

import structlog
from protean.domain import Domain

agristore = Domain(name="agristore")

logger = structlog.get_logger(__name__)

"""Business constants for pricing and checkout.

Every value can be overridden through an environment variable.
"""

import os
from decimal import Decimal

CURRENCY = os.getenv("AGRISTORE_CURRENCY", "TZS")

# VAT applied to (subtotal - discount)
TAX_RATE = Decimal(os.getenv("AGRISTORE_TAX_RATE", "0.18"))

FREE_SHIPPING_THRESHOLD = int(os.getenv("AGRISTORE_FREE_SHIPPING_THRESHOLD", "100000"))
SHIPPING_FEE = int(os.getenv("AGRISTORE_SHIPPING_FEE", "5000"))

RECENT_ORDERS_LIMIT = int(os.getenv("AGRISTORE_RECENT_ORDERS_LIMIT", "10"))

ORDER_NUMBER_PREFIX = "AG"
TRACKING_NUMBER_PREFIX = "TRK"

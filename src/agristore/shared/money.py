"""Currency arithmetic in whole currency units.

Amounts are integers. Each multiplication or percentage is rounded immediately.
"""

from decimal import ROUND_HALF_UP, Decimal

from agristore import config


def round_currency(amount) -> int:
    """Round an amount to the nearest whole unit, halves away from zero."""
    return int(Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def percentage_of(amount: int, percent) -> int:
    """Return ``percent`` % of ``amount``, rounded."""
    return round_currency(Decimal(amount) * Decimal(str(percent)) / Decimal(100))


def calculate_tax(taxable_amount: int, rate: Decimal | None = None) -> int:
    """Tax due on a taxable amount. Negative amounts are taxed as zero."""
    rate = config.TAX_RATE if rate is None else Decimal(str(rate))
    return round_currency(Decimal(max(0, taxable_amount)) * rate)


def format_currency(amount: int, currency: str | None = None) -> str:
    """Human readable amount, e.g. ``50,000 TZS``."""
    return f"{amount:,} {currency or config.CURRENCY}"

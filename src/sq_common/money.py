"""Decimal arithmetic helpers for amounts and prices.

Amounts (stakes, payouts, volumes, balances) carry 2 decimal places.
Prices are percentages in [0, 100] with 4 decimal places, so that
100/3 stays representable closely enough for sum-to-100 corrections.
No float ever touches persisted values.
"""

from decimal import ROUND_HALF_UP, Decimal

MONEY_QUANT = Decimal("0.01")
PRICE_QUANT = Decimal("0.0001")
HUNDRED = Decimal("100")
ZERO = Decimal("0")


def to_decimal(value: object) -> Decimal:
    """Coerce int/str/Decimal (or DB numeric) to Decimal without float drift."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(str(value))


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def quantize_price(value: Decimal) -> Decimal:
    return value.quantize(PRICE_QUANT, rounding=ROUND_HALF_UP)


def clamp(value: Decimal, low: Decimal, high: Decimal) -> Decimal:
    return max(low, min(high, value))


def money_display(amount: Decimal) -> str:
    """Display string: Decimal('65') -> '$65.00', Decimal('-12.5') -> '-$12.50'."""
    q = quantize_money(amount)
    if q < 0:
        return f"-${-q:,.2f}"
    return f"${q:,.2f}"

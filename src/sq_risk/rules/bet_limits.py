"""Stateless trade-input checks. Run before any database access."""

from decimal import Decimal

from config.settings import settings
from src.sq_common.enums import BetSide, TradeType
from src.sq_common.errors import BetAmountOutOfRangeError, InvalidInputError
from src.sq_common.money import MONEY_QUANT, ZERO


def parse_side(side: str) -> BetSide:
    try:
        return BetSide(side)
    except ValueError:
        raise InvalidInputError(f"side must be YES or NO, got {side!r}") from None


def parse_trade_type(trade_type: str) -> TradeType:
    try:
        return TradeType(trade_type)
    except ValueError:
        raise InvalidInputError(f"type must be BUY or SELL, got {trade_type!r}") from None


def check_bet_amount(amount: Decimal, max_amount: Decimal | None = None) -> None:
    """Raise BetAmountOutOfRangeError unless 0 < amount <= max (2 dp at most)."""
    limit = settings.MAX_BET_AMOUNT if max_amount is None else max_amount
    if not amount.is_finite() or not (ZERO < amount <= limit):
        raise BetAmountOutOfRangeError(amount, limit)
    if amount != amount.quantize(MONEY_QUANT):
        raise InvalidInputError(f"amount {amount} has more than 2 decimal places")

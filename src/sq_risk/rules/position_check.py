from decimal import Decimal

from src.sq_common.errors import InsufficientPositionError


def check_position_available(requested: Decimal, available: Decimal) -> None:
    """A SELL may not exceed the net position recomputed under the market lock."""
    if requested > available:
        raise InsufficientPositionError(requested, available)

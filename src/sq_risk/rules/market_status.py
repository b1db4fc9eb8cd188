from src.sq_common.errors import MarketNotActiveError, MarketNotFoundError
from src.sq_market.domain.models import Market


def check_market_tradeable(market: Market | None, market_id: str) -> Market:
    """Market must exist, be ACTIVE and not resolved. Call with the row locked."""
    if market is None:
        raise MarketNotFoundError(market_id)
    if not market.is_tradeable:
        raise MarketNotActiveError(market_id, market.status)
    return market

"""sq_betting REST endpoints.

POST /bets                              — place a BUY or SELL bet (rate limited)
GET  /bets                              — caller's bets, optional ?status=
GET  /markets/{market_id}/positions/me  — caller's net positions on a market
GET  /markets/{market_id}/holders       — top 20 holders by net stake
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sq_betting.application.schemas import PlaceBetRequest
from src.sq_betting.application.service import BettingService
from src.sq_common.database import get_db_session
from src.sq_common.response import ApiResponse, success_response
from src.sq_gateway.auth.dependencies import get_current_user_id
from src.sq_gateway.middleware.rate_limit import limit_trades

router = APIRouter(tags=["bets"])

_service = BettingService()


@router.post("/bets", status_code=201)
async def place_bet(
    body: PlaceBetRequest,
    request: Request,
    user_id: Annotated[str, Depends(limit_trades)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.place_bet(db, user_id, body)
    return success_response(result.model_dump(), request)


@router.get("/bets")
async def list_my_bets(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    status: str | None = Query(None, description="ACTIVE, WON, LOST or REFUNDED"),
    limit: int = Query(50, ge=1, le=200),
) -> ApiResponse:
    result = await _service.list_my_bets(db, user_id, status, limit)
    return success_response(result.model_dump(), request)


@router.get("/markets/{market_id}/positions/me")
async def get_my_positions(
    market_id: str,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_my_positions(db, user_id, market_id)
    return success_response(result.model_dump(), request)


@router.get("/markets/{market_id}/holders")
async def get_holders(
    market_id: str,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    holders = await _service.get_holders(db, market_id)
    return success_response([h.model_dump() for h in holders], request)

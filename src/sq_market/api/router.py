"""sq_market REST endpoints.

POST /markets                                  — create BINARY or MULTIPLE market
GET  /markets                                  — list with cursor pagination
GET  /markets/{market_id}                      — full detail with options
GET  /markets/{market_id}/price-history        — BINARY price series
GET  /markets/{market_id}/options/price-history — MULTIPLE per-option series
GET  /markets/{market_id}/impact-preview       — advisory slippage estimate
"""

from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sq_common.database import get_db_session
from src.sq_common.enums import BetSide
from src.sq_common.response import ApiResponse, success_response
from src.sq_gateway.auth.dependencies import get_current_user_id
from src.sq_market.application.schemas import CreateMarketRequest
from src.sq_market.application.service import MarketApplicationService

router = APIRouter(prefix="/markets", tags=["markets"])

_service = MarketApplicationService()


@router.post("", status_code=201)
async def create_market(
    body: CreateMarketRequest,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.create_market(db, user_id, body)
    return success_response(result.model_dump(), request)


@router.get("")
async def list_markets(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    status: str | None = Query(
        None, description="Filter by status. Default: ACTIVE. Use ALL for no filter."
    ),
    category: str | None = Query(None),
    limit: int = Query(20, ge=1, le=100),
    cursor: str | None = Query(None),
) -> ApiResponse:
    result = await _service.list_markets(db, status, category, cursor, limit)
    return success_response(result.model_dump(), request)


@router.get("/{market_id}")
async def get_market(
    market_id: str,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_market(db, market_id)
    return success_response(result.model_dump(), request)


@router.get("/{market_id}/price-history")
async def get_price_history(
    market_id: str,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    points = await _service.get_price_history(db, market_id)
    return success_response([p.model_dump() for p in points], request)


@router.get("/{market_id}/options/price-history")
async def get_option_price_history(
    market_id: str,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    points = await _service.get_option_price_history(db, market_id)
    return success_response([p.model_dump() for p in points], request)


@router.get("/{market_id}/impact-preview")
async def get_impact_preview(
    market_id: str,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    amount: Decimal = Query(..., gt=0),
    side: BetSide = Query(BetSide.YES),
    option_id: str | None = Query(None),
) -> ApiResponse:
    result = await _service.preview_impact(db, market_id, amount, side, option_id)
    return success_response(result.model_dump(), request)

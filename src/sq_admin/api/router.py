"""Admin REST API.

POST /admin/markets/{market_id}/resolve  — {outcome} or {winning_option_id}
POST /admin/markets/{market_id}/cancel   — void market, refund bets
POST /admin/markets/{market_id}/options  — add an option before trading
GET  /admin/invariants                   — reconciliation scan
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from src.sq_admin.application.service import AdminService
from src.sq_common.database import get_db_session
from src.sq_common.response import ApiResponse, success_response
from src.sq_gateway.auth.dependencies import require_admin
from src.sq_market.application.schemas import AddOptionRequest
from src.sq_market.application.service import MarketApplicationService

router = APIRouter(prefix="/admin", tags=["admin"])
_service = AdminService()
_markets = MarketApplicationService()


class ResolveRequest(BaseModel):
    outcome: bool | None = None
    winning_option_id: str | None = None


@router.post("/markets/{market_id}/resolve")
async def resolve_market(
    market_id: str,
    body: ResolveRequest,
    request: Request,
    admin_id: Annotated[str, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.resolve_market(db, market_id, body.outcome, body.winning_option_id)
    return success_response(result, request)


@router.post("/markets/{market_id}/cancel")
async def cancel_market(
    market_id: str,
    request: Request,
    admin_id: Annotated[str, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.cancel_market(db, market_id)
    return success_response(result, request)


@router.post("/markets/{market_id}/options", status_code=201)
async def add_option(
    market_id: str,
    body: AddOptionRequest,
    request: Request,
    admin_id: Annotated[str, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _markets.add_option(db, market_id, body.title)
    return success_response(result.model_dump(), request)


@router.get("/invariants")
async def verify_invariants(
    request: Request,
    admin_id: Annotated[str, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.verify_all_invariants(db)
    return success_response(result, request)

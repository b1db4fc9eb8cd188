"""sq_account REST endpoints.

GET /account/me — balance and settlement stats of the session user
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sq_account.application.service import AccountApplicationService
from src.sq_common.database import get_db_session
from src.sq_common.response import ApiResponse, success_response
from src.sq_gateway.auth.dependencies import get_current_user_id

router = APIRouter(prefix="/account", tags=["account"])

_service = AccountApplicationService()


@router.get("/me")
async def get_my_account(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_summary(db, user_id)
    return success_response(result.model_dump(), request)

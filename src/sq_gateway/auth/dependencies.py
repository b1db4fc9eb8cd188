"""FastAPI dependencies for the session boundary.

Usage in any protected router:
    from src.sq_gateway.auth.dependencies import get_current_user_id

    @router.post("/bets")
    async def place_bet(user_id: Annotated[str, Depends(get_current_user_id)]):
        ...
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.sq_account.infrastructure.persistence import AccountRepository
from src.sq_common.database import get_db_session
from src.sq_common.errors import AdminRequiredError, InvalidCredentialsError
from src.sq_gateway.auth.jwt_handler import decode_access_token

# Tokens come from the external auth service; tokenUrl only feeds Swagger UI.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)

_accounts = AccountRepository()


async def get_current_user_id(token: Annotated[str, Depends(oauth2_scheme)]) -> str:
    """Extract and validate the Bearer token, return the session user id."""
    try:
        return decode_access_token(token)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None


async def require_admin(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> str:
    """Verify the caller is an admin; returns the admin's user id."""
    account = await _accounts.get_account(db, user_id)
    if account is None or not account.is_admin:
        raise AdminRequiredError()
    return user_id

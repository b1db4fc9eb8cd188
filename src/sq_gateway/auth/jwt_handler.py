"""JWT verification for the session boundary.

Tokens are issued by the external auth service (HS256, shared JWT_SECRET).
This service only needs the subject (user id) of a valid access token;
create_access_token exists for local tooling and integration tests.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.sq_common.errors import InvalidCredentialsError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"


def create_access_token(user_id: str, expires_in: timedelta = timedelta(minutes=30)) -> str:
    now = datetime.now(UTC)
    payload = {
        "sub": user_id,
        "type": "access",
        "iat": now,
        "exp": now + expires_in,
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_access_token(token: str) -> str:
    """Return the user id of a valid access token.

    Raises:
        InvalidCredentialsError: signature, expiry or token type is wrong,
            or the subject is missing.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    if payload.get("type") != "access":
        raise InvalidCredentialsError()
    user_id = payload.get("sub")
    if not user_id:
        raise InvalidCredentialsError()
    return str(user_id)

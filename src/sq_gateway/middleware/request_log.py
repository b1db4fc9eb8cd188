"""Request correlation and access logging.

The upstream gateway may already have assigned an X-Request-ID; it is kept
when it looks sane, otherwise a short id is generated. The id lands on
request.state (the ApiResponse envelope reads it from there) and is echoed
back in the X-Request-ID response header.

    INFO  [POST] /api/v1/bets → 201 (23ms) req_a1b2c3d4e5f6
    WARN  [POST] /api/v1/admin/markets/mkt_x/resolve → 503 (40ms) req_...

Health probes are logged at DEBUG only.
"""

import logging
import re
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.sq_common.response import new_request_id

logger = logging.getLogger("sq.request")

REQUEST_ID_HEADER = "X-Request-ID"
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9_\-.:]{1,64}$")
_QUIET_PATHS = frozenset({"/health"})


def resolve_request_id(incoming: str | None) -> str:
    if incoming and _VALID_REQUEST_ID.match(incoming):
        return incoming
    return new_request_id()


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id

        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        if request.url.path in _QUIET_PATHS:
            level = logging.DEBUG
        elif response.status_code >= 500:
            level = logging.WARNING
        else:
            level = logging.INFO
        logger.log(
            level,
            "[%s] %s → %d (%.0fms) %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

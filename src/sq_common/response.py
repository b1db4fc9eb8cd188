"""ApiResponse envelope shared by every endpoint, success or error.

{
    "code": 0,             // 0 on success, AppError.code otherwise
    "message": "success",
    "data": { ... },       // null on error
    "timestamp": "...",    // UTC ISO-8601
    "request_id": "..."    // same value as the X-Request-ID header
}
"""

import uuid
from typing import Any

from pydantic import BaseModel, Field
from starlette.requests import Request

from src.sq_common.datetime_utils import utc_now


def new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


def request_id_of(request: Request | None) -> str:
    """Correlation id set by RequestLogMiddleware, or a fresh one outside a request."""
    if request is None:
        return new_request_id()
    return getattr(request.state, "request_id", None) or new_request_id()


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: utc_now().isoformat())
    request_id: str = Field(default_factory=new_request_id)


def success_response(data: Any = None, request: Request | None = None) -> ApiResponse:
    return ApiResponse(data=data, request_id=request_id_of(request))


def error_response(code: int, message: str, request: Request | None = None) -> ApiResponse:
    return ApiResponse(code=code, message=message, data=None, request_id=request_id_of(request))

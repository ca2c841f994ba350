"""
JournalApp Backend — Request ID Middleware
============================================

What:  Tags each request with a correlation ID and echoes it back.
Why:   Every log line and every error body of one request share the same ID,
       so a user report ("request 3f9c0a1b2d4e failed") maps straight to logs.
How:   A client-supplied X-Request-ID is honoured when it is a short token;
       anything else is replaced by a generated one. The ID lives in a
       ContextVar for loggers and exception handlers.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Mobile clients send their own IDs; those end up in log lines verbatim
_ACCEPTED_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:12]


def resolve_request_id(supplied: Optional[str]) -> str:
    """The client's ID when it is safe to log, otherwise a fresh one."""
    if supplied and _ACCEPTED_ID.match(supplied):
        return supplied
    return new_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request_id_var.set(request_id)
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

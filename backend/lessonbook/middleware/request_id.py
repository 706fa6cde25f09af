"""
LessonBook Backend — Request ID Middleware
============================================

What:  Tags each request with a short correlation id and returns it in the
       X-Request-ID response header.
How:   Reuses a well-formed client-sent X-Request-ID, otherwise generates
       one. The id is stored in a ContextVar so error handlers and loggers
       can read it without access to the request object.

Error bodies carry only `{"error": ...}`; the header is where clients find
the id to quote in a support request.

Unhandled exceptions are turned into the generic 500 response inside this
middleware, so those responses carry the header too.
"""

import logging
import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from lessonbook.exceptions import INTERNAL_ERROR_MESSAGE

logger = logging.getLogger(__name__)

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Client ids are echoed into logs; only short token-like values are accepted
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9_\-]{1,64}$")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns a request id, exposes it via request.state and the response header."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID", "")
        if not _VALID_REQUEST_ID.match(rid):
            rid = new_request_id()

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        except Exception as exc:
            # Unhandled error: answered here while the id is still bound
            logger.error("[%s] Unhandled error: %s", rid, str(exc), exc_info=exc)
            response = JSONResponse(status_code=500, content={"error": INTERNAL_ERROR_MESSAGE})
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = rid
        return response

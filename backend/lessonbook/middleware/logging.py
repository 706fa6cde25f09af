"""
LessonBook Backend — Request Logging Middleware
=================================================

What:  One access-log line per request: method, path, status, duration,
       request id and client address.
Who:   Applied to every request except /health.

Log line:
    2024-05-02T10:15:00 [INFO] lessonbook.access: GET /lessons 200 4.2ms [a1b2c3d4] from 127.0.0.1

Request bodies are never logged here (orders carry names and phone numbers).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from lessonbook.middleware.request_id import request_id_var

logger = logging.getLogger("lessonbook.access")

_SKIP_PATHS = {"/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each request once the response is available.

    Level follows the status class: 5xx → ERROR, 4xx → WARNING, else INFO.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in _SKIP_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        client_ip = request.client.host if request.client else "unknown"
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            request.url.path,
            status,
            duration_ms,
            request_id_var.get(""),
            client_ip,
        )
        return response

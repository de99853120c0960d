"""
Api.Template — Request Logging Middleware
===========================================

What:  One log entry per HTTP request: method, path, status, duration.
How:   Measures the time spent in the rest of the pipeline and logs a summary
       line once the response is ready. The request path is also attached as
       the `request_path` diagnostic field on the record.
Who:   Applied to every request via Starlette middleware.
When:  Directly inside CorrelationIdMiddleware, so entries carry the
       correlation ID, span ID and client IP through the enrichment filter.

What we log vs what we DON'T log:
    ✅ Log: method, path, status, duration
    ❌ Don't log: request/response bodies, Authorization header
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("api_template.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs structured information about each HTTP request and response.

    Log level follows the status code:
        5xx → ERROR, 4xx → WARNING, everything else → INFO
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()
        method = request.method
        path = request.url.path

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "HTTP %s %s responded %d in %.4f ms",
            method,
            path,
            status,
            duration_ms,
            extra={
                "request_path": path,
                "method": method,
                "status": status,
                "duration_ms": round(duration_ms, 2),
            },
        )

        return response

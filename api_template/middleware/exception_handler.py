"""
Api.Template — Global Exception Handling Middleware
=====================================================

What:  Last line of defence: turns any exception that escapes an endpoint
       into a 500 problem-details response.
How:   Wraps call_next in try/except. HTTP errors, request validation errors
       and ApiTemplateError subclasses are already rendered by the handlers
       registered in main.py, so only truly unexpected faults arrive here.
When:  Innermost middleware, so request logging and compression see the
       500 response like any other.

Security: the stack trace is logged server-side ONLY, never returned.
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from api_template.problem_details import problem_response

logger = logging.getLogger(__name__)


class ExceptionHandlingMiddleware(BaseHTTPMiddleware):
    """Catch-all converting unhandled exceptions into problem responses."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error(
                "Unhandled exception processing %s %s: %s",
                request.method,
                request.url.path,
                exc,
                exc_info=True,
            )
            return problem_response(request, status=500)

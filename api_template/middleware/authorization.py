"""
Api.Template — Authorization Middleware
=========================================

What:  Evaluates authorization policies before a request reaches compression
       and the endpoints.
How:   Each policy is a named callable taking the Request and returning True
       to allow it. The first denying policy produces a 403 problem response.

The template registers no policies, so every request passes straight
through. The `Bearer` security scheme in the OpenAPI document is
documentation only.
"""

import logging
from typing import Callable, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from api_template.problem_details import problem_response

logger = logging.getLogger(__name__)

Policy = Callable[[Request], bool]


class AuthorizationMiddleware(BaseHTTPMiddleware):
    """Pass-through unless a policy is registered and denies the request."""

    def __init__(self, app: ASGIApp, policies: Optional[Dict[str, Policy]] = None) -> None:
        super().__init__(app)
        self.policies: Dict[str, Policy] = dict(policies or {})

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        for name, policy in self.policies.items():
            if not policy(request):
                detail = f"Access denied by authorization policy '{name}'"
                logger.warning("Authorization denied %s %s: %s", request.method, request.url.path, detail)
                return problem_response(request, status=403, detail=detail)

        return await call_next(request)

"""
Api.Template — HTTPS Redirect Middleware
==========================================

What:  Forces encrypted transport: plaintext requests get a 307 redirect.
How:   Extends Starlette's HTTPSRedirectMiddleware with a set of exempt paths.
       The development documentation endpoints are exempt, since they sit
       ahead of the redirect in the request pipeline.
"""

from typing import Iterable

from starlette.middleware.httpsredirect import HTTPSRedirectMiddleware as _StarletteHTTPSRedirect
from starlette.types import ASGIApp, Receive, Scope, Send


class HTTPSRedirectMiddleware(_StarletteHTTPSRedirect):
    """HTTPS redirect that lets a fixed set of paths through unchanged."""

    def __init__(self, app: ASGIApp, exempt_paths: Iterable[str] = ()) -> None:
        super().__init__(app)
        self.exempt_paths = frozenset(exempt_paths)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] in ("http", "websocket") and scope["path"] in self.exempt_paths:
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)

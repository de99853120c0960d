"""
Api.Template — Response Compression Middleware
================================================

What:  Gzip-compresses responses whose content type is on a whitelist.
How:   Extends Starlette's GZipMiddleware. Its responder inspects the
       `http.response.start` message and forwards responses with other
       content types (or 204/304 statuses) untouched; everything else goes
       through Starlette's streaming gzip path, which also sets
       Content-Encoding, Content-Length and Vary.
Who:   Applied to every request; compresses over both HTTP and HTTPS.
When:  Inside authorization, outside the endpoint and health check.
"""

from typing import Iterable

from starlette.datastructures import Headers
from starlette.middleware.gzip import GZipMiddleware, GZipResponder
from starlette.types import ASGIApp, Message, Receive, Scope, Send

DEFAULT_MIME_TYPES = (
    "application/json",
    "text/plain",
    "text/css",
    "application/javascript",
)


class WhitelistGZipResponder(GZipResponder):
    """GZipResponder that only compresses whitelisted content types."""

    def __init__(
        self,
        app: ASGIApp,
        minimum_size: int,
        mime_types: frozenset,
        compresslevel: int = 9,
    ) -> None:
        super().__init__(app, minimum_size, compresslevel=compresslevel)
        self.mime_types = mime_types
        self.passthrough = False

    async def send_with_compression(self, message: Message) -> None:
        if message["type"] == "http.response.start":
            content_type = Headers(raw=message["headers"]).get("content-type", "")
            self.passthrough = (
                message["status"] in (204, 304)
                or content_type.split(";")[0].strip().lower() not in self.mime_types
            )
        if self.passthrough:
            await self.send(message)
            return
        await super().send_with_compression(message)


class CompressionMiddleware(GZipMiddleware):
    """Gzip compression restricted to a fixed set of MIME types."""

    def __init__(
        self,
        app: ASGIApp,
        mime_types: Iterable[str] = DEFAULT_MIME_TYPES,
        minimum_size: int = 0,
        compresslevel: int = 6,
    ) -> None:
        super().__init__(app, minimum_size=minimum_size, compresslevel=compresslevel)
        self.mime_types = frozenset(m.lower() for m in mime_types)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or "gzip" not in Headers(scope=scope).get("Accept-Encoding", ""):
            await self.app(scope, receive, send)
            return

        responder = WhitelistGZipResponder(
            self.app,
            self.minimum_size,
            mime_types=self.mime_types,
            compresslevel=self.compresslevel,
        )
        await responder(scope, receive, send)

"""
Api.Template — Correlation Context Middleware
===============================================

What:  Establishes per-request log context: correlation ID, span ID, client IP.
How:   Stores the values in ContextVars that the logging enrichment filter
       reads, and echoes the correlation ID in the X-Correlation-ID header.
Who:   Applied to every request via Starlette middleware.
When:  Outermost middleware, so every later stage logs with the context set.

Span IDs:
    If the caller sends a W3C `traceparent` header
    (version-traceid-parentid-flags), its parent-id becomes our span ID so
    log lines line up with the caller's trace. Otherwise a random 8-byte
    hex span ID is generated.
"""

import secrets
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

CORRELATION_HEADER = "X-Correlation-ID"

# ── Context Variables ─────────────────────────────────────────────────────
# Coroutine-local: each in-flight request sees only its own values
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")
span_id_var: ContextVar[str] = ContextVar("span_id", default="")
client_ip_var: ContextVar[str] = ContextVar("client_ip", default="")


def parse_traceparent(header: Optional[str]) -> Optional[str]:
    """Return the parent span ID from a W3C traceparent header, if well-formed."""
    if not header:
        return None
    parts = header.strip().split("-")
    if len(parts) != 4:
        return None
    span_id = parts[2].lower()
    if len(span_id) != 16 or span_id == "0" * 16:
        return None
    try:
        int(span_id, 16)
    except ValueError:
        return None
    return span_id


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Assigns correlation, span and client-IP context to each request.

    Behavior:
        1. Reuse the client's X-Correlation-ID header, or generate a UUID
        2. Derive the span ID from `traceparent`, or generate one
        3. Store all three in ContextVars (read by the log enrichment filter)
           and the correlation ID in request.state
        4. Add X-Correlation-ID to the response
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        span_id = parse_traceparent(request.headers.get("traceparent")) or secrets.token_hex(8)
        client_ip = request.client.host if request.client else "unknown"

        tokens = (
            correlation_id_var.set(rid),
            span_id_var.set(span_id),
            client_ip_var.set(client_ip),
        )
        request.state.correlation_id = rid

        try:
            response = await call_next(request)
        finally:
            for var, token in zip((correlation_id_var, span_id_var, client_ip_var), tokens):
                var.reset(token)

        response.headers[CORRELATION_HEADER] = rid
        return response

"""
Api.Template — Health Check Route
===================================

What:  Liveness endpoint for monitoring and load balancer probes.
How:   Runs the checks in app.state.health_checks and returns a plain-text
       status: 200 "Healthy" or 503 "Unhealthy".
Who:   Called by container health checks, load balancers and uptime monitors.

The template registers no checks, so the endpoint always reports Healthy.
It is left out of the OpenAPI document.
"""

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from api_template.health import HEALTHY, HealthCheckRegistry

router = APIRouter(tags=["Health"])


@router.get("/health", include_in_schema=False, response_class=PlainTextResponse)
async def health_check(request: Request) -> PlainTextResponse:
    registry: HealthCheckRegistry = request.app.state.health_checks
    status = registry.run()
    return PlainTextResponse(
        status,
        status_code=200 if status == HEALTHY else 503,
        headers={"Cache-Control": "no-store, no-cache"},
    )

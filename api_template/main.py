"""
Api.Template — FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() builds the app, then applies two registration steps:
         register_services()   → exception handlers, health checks, services,
                                 routers, OpenAPI security scheme
         register_middleware() → the ordered request pipeline
Who:   Called by the entry point (python -m api_template) or by uvicorn
       directly (uvicorn api_template.main:app).

Request Pipeline (outermost first):
    ┌──────────────────────────────────────────────────────┐
    │  Correlation context  (X-Correlation-ID, span, IP)   │
    │  Request logging      (method, path, status, time)   │
    │  Docs (Development)   /openapi/v1.json /swagger /scalar│
    │  HTTPS redirect       (307 to https://)              │
    │  Authorization        (no policies → pass-through)   │
    │  Compression          (gzip, whitelisted MIME types) │
    │  Exception handling   (500 problem details)          │
    │  GET /health  →  GET /WeatherForecast                │
    └──────────────────────────────────────────────────────┘
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse
from fastapi.security import HTTPBearer
from scalar_fastapi import get_scalar_api_reference
from starlette.exceptions import HTTPException as StarletteHTTPException

from api_template import __version__
from api_template.config import Settings, settings as default_settings
from api_template.exceptions import ApiTemplateError
from api_template.health import HealthCheckRegistry
from api_template.middleware.authorization import AuthorizationMiddleware, Policy
from api_template.middleware.compression import CompressionMiddleware
from api_template.middleware.correlation import CorrelationIdMiddleware
from api_template.middleware.exception_handler import ExceptionHandlingMiddleware
from api_template.middleware.https_redirect import HTTPSRedirectMiddleware
from api_template.middleware.logging import RequestLoggingMiddleware
from api_template.problem_details import problem_response
from api_template.routes import health, weather_forecast
from api_template.services.forecast_service import ForecastService

logger = logging.getLogger(__name__)

OPENAPI_URL = "/openapi/v1.json"
SWAGGER_URL = "/swagger"
SCALAR_URL = "/scalar/v1"

# Documentation-only: advertised on every operation, enforced nowhere
bearer_scheme = HTTPBearer(
    scheme_name="Bearer",
    description="JWT Authorization header using the Bearer scheme.",
    auto_error=False,
)


def docs_paths(settings: Settings) -> List[str]:
    """Paths served by the documentation endpoints (empty outside Development)."""
    if not settings.is_development:
        return []
    return [OPENAPI_URL, SWAGGER_URL, f"{SWAGGER_URL}/oauth2-redirect", SCALAR_URL]


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log startup and shutdown banners."""
    log: logging.Logger = app.state.logger
    app_settings: Settings = app.state.settings

    log.info("=" * 60)
    log.info("%s starting up (environment: %s)", app_settings.application_name, app_settings.environment)
    if app_settings.is_development:
        log.info("API docs: %s, %s, %s", OPENAPI_URL, SWAGGER_URL, SCALAR_URL)
    log.info("=" * 60)

    yield

    log.info("%s shutting down...", app_settings.application_name)


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register problem-details handlers for every error the framework knows about.

    Handler map:
        ApiTemplateError        → exc.status_code (404, 403, 500, ...)
        HTTPException           → exc.status_code (404 unknown route, 405, ...)
        RequestValidationError  → 422 with `errors` (mirrored as `validationErrors`)
        Exception               → 500, for faults outside ExceptionHandlingMiddleware
    Endpoint faults are caught first by ExceptionHandlingMiddleware → 500.
    """

    @app.exception_handler(ApiTemplateError)
    async def handle_api_error(request: Request, exc: ApiTemplateError):
        if exc.status_code >= 500:
            logger.error("Application error: %s | Context: %s", exc.message, exc.context)
        else:
            logger.warning("Application error: %s", exc.message)
        return problem_response(request, status=exc.status_code, detail=exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        detail = exc.detail if isinstance(exc.detail, str) else None
        return problem_response(
            request,
            status=exc.status_code,
            detail=detail,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        logger.warning("Request validation failed for %s %s", request.method, request.url.path)
        return problem_response(
            request,
            status=422,
            title="One or more validation errors occurred.",
            extensions={"errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        # Reached only for faults raised outside ExceptionHandlingMiddleware
        logger.error("Unexpected error: %s", str(exc), exc_info=True)
        return problem_response(request, status=500)


def register_documentation(app: FastAPI, settings: Settings) -> None:
    """Mount the Scalar API reference next to Swagger UI (Development only)."""
    if not settings.is_development:
        return

    @app.get(SCALAR_URL, include_in_schema=False)
    async def scalar_reference() -> HTMLResponse:
        return get_scalar_api_reference(
            openapi_url=OPENAPI_URL,
            title=settings.application_name,
        )


# ══════════════════════════════════════════════════════════════════════════
# Registration Steps
# ══════════════════════════════════════════════════════════════════════════

def register_services(app: FastAPI, settings: Settings, log: logging.Logger) -> FastAPI:
    """Attach exception handlers, health checks, services and routers."""
    register_exception_handlers(app)
    register_documentation(app, settings)

    # No checks registered: /health is always Healthy
    app.state.health_checks = HealthCheckRegistry()

    app.state.forecast_service = ForecastService(logger=log, days=settings.forecast_days)

    app.include_router(weather_forecast.router)
    app.include_router(health.router)

    return app


def register_middleware(
    app: FastAPI,
    settings: Settings,
    authorization_policies: Optional[Dict[str, Policy]] = None,
) -> FastAPI:
    """
    Install the request pipeline.

    Starlette runs middleware in REVERSE order of addition (last added runs
    first), so stages are added innermost first.
    """
    app.add_middleware(ExceptionHandlingMiddleware)

    app.add_middleware(
        CompressionMiddleware,
        mime_types=settings.compression_mime_types,
        minimum_size=settings.compression_minimum_size,
        compresslevel=settings.compression_level,
    )

    app.add_middleware(AuthorizationMiddleware, policies=authorization_policies)

    if settings.https_redirect:
        app.add_middleware(HTTPSRedirectMiddleware, exempt_paths=docs_paths(settings))

    app.add_middleware(RequestLoggingMiddleware)

    app.add_middleware(CorrelationIdMiddleware)

    return app


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    log: Optional[logging.Logger] = None,
    authorization_policies: Optional[Dict[str, Policy]] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration to use; defaults to the module-level singleton.
        log:      Application logger handed to services; defaults to "api_template".
        authorization_policies: Named policies for AuthorizationMiddleware.

    Documentation endpoints are only mounted when settings.environment is
    Development; elsewhere they return 404.
    """
    settings = settings or default_settings
    log = log or logging.getLogger("api_template")
    is_dev = settings.is_development

    app = FastAPI(
        title=settings.application_name,
        version="v1",
        description=f"{settings.application_name} HTTP API (build {__version__})",
        openapi_url=OPENAPI_URL if is_dev else None,
        docs_url=SWAGGER_URL if is_dev else None,
        redoc_url=None,
        swagger_ui_oauth2_redirect_url=f"{SWAGGER_URL}/oauth2-redirect",
        swagger_ui_parameters={"defaultModelsExpandDepth": -1},
        dependencies=[Depends(bearer_scheme)],
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.logger = log

    register_services(app, settings, log)
    register_middleware(app, settings, authorization_policies)

    return app


# Module-level instance for `uvicorn api_template.main:app`
app = create_app()

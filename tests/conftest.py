"""
Api.Template — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── dev_settings / prod_settings: Settings for each environment
    ├── dev_app / prod_app:           Fresh FastAPI instances from create_app()
    ├── client:                       HTTPS client against dev_app
    ├── prod_client:                  HTTPS client against prod_app
    └── plain_client:                 Plaintext HTTP client against prod_app
"""

import os

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Override settings for testing BEFORE any app imports
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("ENVIRONMENT", None)
os.environ.pop("LOG_CONFIG", None)

from api_template.config import Settings  # noqa: E402
from api_template.main import create_app  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def dev_settings():
    return Settings(environment="Development")


@pytest.fixture
def prod_settings():
    return Settings(environment="Production")


@pytest.fixture
def dev_app(dev_settings):
    return create_app(dev_settings)


@pytest.fixture
def prod_app(prod_settings):
    return create_app(prod_settings)


@pytest_asyncio.fixture
async def client(dev_app):
    """
    HTTPX AsyncClient talking HTTPS to the Development app.

    Usage:
        async def test_health(client):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=dev_app)
    async with AsyncClient(transport=transport, base_url="https://test") as c:
        yield c


@pytest_asyncio.fixture
async def prod_client(prod_app):
    transport = ASGITransport(app=prod_app)
    async with AsyncClient(transport=transport, base_url="https://test") as c:
        yield c


@pytest_asyncio.fixture
async def plain_client(prod_app):
    """Plaintext client; redirects are NOT followed so 307s can be asserted."""
    transport = ASGITransport(app=prod_app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

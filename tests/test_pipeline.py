"""
Api.Template — Request Pipeline Tests
=======================================

What:  Tests for the middleware stages installed by register_middleware().

Test Strategy:
    ✅ HTTPS redirect (and its documentation exemption)
    ✅ Compression whitelist and Accept-Encoding negotiation
    ✅ Correlation ID propagation
    ✅ Authorization pass-through and denying policies
    ✅ Request logging fields
"""

import logging

import pytest
from httpx import AsyncClient, ASGITransport
from starlette.applications import Starlette
from starlette.responses import Response, StreamingResponse
from starlette.routing import Route

from api_template.config import Settings
from api_template.main import create_app
from api_template.middleware.compression import CompressionMiddleware
from api_template.middleware.correlation import parse_traceparent
from api_template.problem_details import PROBLEM_MEDIA_TYPE


class TestHttpsRedirect:
    """Plaintext requests must be upgraded to HTTPS."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/WeatherForecast", "/health"])
    async def test_plaintext_is_redirected(self, plain_client, path):
        response = await plain_client.get(path)

        assert response.status_code == 307
        assert response.headers["location"] == f"https://test{path}"

    @pytest.mark.asyncio
    async def test_https_is_not_redirected(self, prod_client):
        response = await prod_client.get("/health")
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_docs_exempt_in_development(self, dev_app):
        transport = ASGITransport(app=dev_app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            assert (await c.get("/swagger")).status_code == 200
            assert (await c.get("/WeatherForecast")).status_code == 307

    @pytest.mark.asyncio
    async def test_redirect_can_be_disabled(self):
        app = create_app(Settings(https_redirect=False))
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            assert (await c.get("/health")).status_code == 200


class TestCompression:
    """Gzip is applied only to whitelisted content types."""

    @pytest.mark.asyncio
    async def test_json_is_gzipped(self, client):
        response = await client.get("/WeatherForecast", headers={"Accept-Encoding": "gzip"})

        assert response.headers["content-encoding"] == "gzip"
        assert "Accept-Encoding" in response.headers["vary"]
        assert len(response.json()) == 5  # httpx decodes transparently

    @pytest.mark.asyncio
    async def test_plain_text_is_gzipped(self, client):
        response = await client.get("/health", headers={"Accept-Encoding": "gzip"})

        assert response.headers["content-encoding"] == "gzip"
        assert response.text == "Healthy"

    @pytest.mark.asyncio
    async def test_not_compressed_without_accept_encoding(self, client):
        response = await client.get("/WeatherForecast", headers={"Accept-Encoding": "identity"})

        assert "content-encoding" not in response.headers
        assert len(response.json()) == 5

    @pytest.mark.asyncio
    async def test_problem_json_not_whitelisted(self, client):
        response = await client.get("/missing", headers={"Accept-Encoding": "gzip"})

        assert response.headers["content-type"].startswith(PROBLEM_MEDIA_TYPE)
        assert "content-encoding" not in response.headers

    @pytest.mark.asyncio
    async def test_html_not_whitelisted(self, client):
        response = await client.get("/swagger", headers={"Accept-Encoding": "gzip"})

        assert response.headers["content-type"].startswith("text/html")
        assert "content-encoding" not in response.headers


class TestCompressionMiddleware:
    """CompressionMiddleware on a bare Starlette app."""

    @staticmethod
    def make_app(minimum_size: int = 0) -> Starlette:
        async def chunks():
            for i in range(3):
                yield f"chunk-{i};"

        async def streamed(request):
            return StreamingResponse(chunks(), media_type="text/plain")

        async def empty(request):
            return Response(status_code=204)

        async def styles(request):
            return Response("body { color: red; }", media_type="text/css")

        app = Starlette(
            routes=[
                Route("/streamed", streamed),
                Route("/empty", empty),
                Route("/styles", styles),
            ]
        )
        return CompressionMiddleware(app, minimum_size=minimum_size)

    @pytest.mark.asyncio
    async def test_streaming_response_is_gzipped(self):
        transport = ASGITransport(app=self.make_app())
        async with AsyncClient(transport=transport, base_url="https://test") as c:
            response = await c.get("/streamed", headers={"Accept-Encoding": "gzip"})

        assert response.headers["content-encoding"] == "gzip"
        assert response.text == "chunk-0;chunk-1;chunk-2;"

    @pytest.mark.asyncio
    async def test_no_content_left_alone(self):
        transport = ASGITransport(app=self.make_app())
        async with AsyncClient(transport=transport, base_url="https://test") as c:
            response = await c.get("/empty", headers={"Accept-Encoding": "gzip"})

        assert response.status_code == 204
        assert "content-encoding" not in response.headers
        assert response.content == b""

    @pytest.mark.asyncio
    async def test_minimum_size_respected(self):
        transport = ASGITransport(app=self.make_app(minimum_size=1000))
        async with AsyncClient(transport=transport, base_url="https://test") as c:
            response = await c.get("/styles", headers={"Accept-Encoding": "gzip"})

        assert "content-encoding" not in response.headers
        assert response.text == "body { color: red; }"

    @pytest.mark.asyncio
    async def test_css_is_gzipped(self):
        transport = ASGITransport(app=self.make_app())
        async with AsyncClient(transport=transport, base_url="https://test") as c:
            response = await c.get("/styles", headers={"Accept-Encoding": "gzip"})

        assert response.headers["content-encoding"] == "gzip"
        assert response.text == "body { color: red; }"


class TestCorrelation:
    """Correlation IDs are echoed back and generated when missing."""

    @pytest.mark.asyncio
    async def test_generated_when_missing(self, client):
        response = await client.get("/health")
        assert response.headers["X-Correlation-ID"]

    @pytest.mark.asyncio
    async def test_client_value_echoed(self, client):
        response = await client.get("/health", headers={"X-Correlation-ID": "abc-123"})
        assert response.headers["X-Correlation-ID"] == "abc-123"

    def test_parse_traceparent(self):
        header = "00-4bf92f3577b34da6a3ce929d0e0e4736-00f067aa0ba902b7-01"
        assert parse_traceparent(header) == "00f067aa0ba902b7"

    @pytest.mark.parametrize(
        "header",
        [None, "", "garbage", "00-abc-xyz-01", "00-4bf92f3577b34da6a3ce929d0e0e4736-0000000000000000-01"],
    )
    def test_parse_traceparent_rejects_invalid(self, header):
        assert parse_traceparent(header) is None


class TestAuthorization:
    """No policies → pass-through; a denying policy → 403 problem."""

    @pytest.mark.asyncio
    async def test_denying_policy_returns_problem(self, dev_settings):
        app = create_app(dev_settings, authorization_policies={"deny-all": lambda request: False})
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="https://test") as c:
            response = await c.get("/WeatherForecast")

        assert response.status_code == 403
        body = response.json()
        assert body["status"] == 403
        assert "deny-all" in body["detail"]

    @pytest.mark.asyncio
    async def test_failing_policy_returns_problem(self, dev_settings):
        """A fault outside the inner pipeline still yields a problem body."""

        def broken_policy(request):
            raise RuntimeError("policy store unavailable")

        app = create_app(dev_settings, authorization_policies={"broken": broken_policy})
        # ServerErrorMiddleware re-raises after responding; keep the response
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="https://test") as c:
            response = await c.get("/WeatherForecast")

        assert response.status_code == 500
        assert response.headers["content-type"].startswith(PROBLEM_MEDIA_TYPE)
        body = response.json()
        assert body["status"] == 500
        assert body["instance"] == "/WeatherForecast"
        assert "policy store unavailable" not in response.text

    @pytest.mark.asyncio
    async def test_allowing_policy_passes(self, dev_settings):
        app = create_app(dev_settings, authorization_policies={"allow-all": lambda request: True})
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="https://test") as c:
            response = await c.get("/WeatherForecast")

        assert response.status_code == 200


class TestRequestLogging:
    """One access log entry per request with the request path attached."""

    @pytest.mark.asyncio
    async def test_access_entry_logged(self, client, caplog):
        caplog.set_level(logging.INFO, logger="api_template.access")

        await client.get("/WeatherForecast")

        records = [r for r in caplog.records if r.name == "api_template.access"]
        assert len(records) == 1
        record = records[0]
        assert record.request_path == "/WeatherForecast"
        assert record.method == "GET"
        assert record.status == 200
        assert record.levelno == logging.INFO

    @pytest.mark.asyncio
    async def test_server_error_logged_at_error(self, dev_app, client, caplog):
        caplog.set_level(logging.INFO, logger="api_template.access")

        @dev_app.get("/explode")
        async def explode():
            raise RuntimeError("kaboom")

        response = await client.get("/explode")

        assert response.status_code == 500
        records = [r for r in caplog.records if r.name == "api_template.access"]
        assert records[-1].levelno == logging.ERROR
        assert records[-1].status == 500

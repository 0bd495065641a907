"""HTTP API tests through FastAPI's TestClient."""

from unittest.mock import AsyncMock, patch

import pytest
import requests
from fastapi.testclient import TestClient

from conftest import RecordingProvider
from goglobal.infrastructure.ratelimit import InMemoryRateLimitStore, RateLimiter
from goglobal.web.app import create_app


@pytest.fixture
def app(make_settings, recording_provider):
    return create_app(settings=make_settings(), provider=recording_provider)


@pytest.fixture
def client(app):
    return TestClient(app)


class TestInfoRoutes:

    def test_service_info(self, client):
        response = client.get("/")

        assert response.status_code == 200
        body = response.json()
        assert body["service"] == "GOGLOBAL Market Analysis API"
        assert body["version"] == "1.0.0"
        assert body["status"] == "running"
        assert body["endpoints"]["analyze"] == "POST /api/analyze"

    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_unknown_route(self, client):
        response = client.get("/api/nope")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Endpoint not found"
        assert body["path"] == "/api/nope"
        assert "timestamp" in body

    def test_cors_preflight(self, client):
        response = client.options(
            "/api/analyze",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:5173"


class TestAnalyze:

    def test_success(self, client, recording_provider, product_payload):
        response = client.post("/api/analyze", json={"productData": product_payload})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        markets = body["data"]["markets"]
        assert list(markets) == ["United States", "Germany"]
        assert markets["Germany"]["overallScore"] == 80
        assert markets["Germany"]["recommendation"] == "recommended"
        assert recording_provider.calls == ["United States", "Germany"]

    def test_empty_markets_rejected_before_any_analysis(self, client, recording_provider, product_payload):
        product_payload["targetMarkets"] = []

        response = client.post("/api/analyze", json={"productData": product_payload})

        assert response.status_code == 400
        assert response.json()["error"] == "targetMarkets must be a non-empty array"
        assert recording_provider.calls == []

    def test_missing_product_data(self, client):
        response = client.post("/api/analyze", json={"somethingElse": {}})

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "Missing productData in request body",
            "timestamp": response.json()["timestamp"],
        }

    def test_malformed_json_body(self, client):
        response = client.post(
            "/api/analyze", content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Missing productData in request body"

    def test_missing_fields(self, client, product_payload):
        del product_payload["category"]

        response = client.post("/api/analyze", json={"productData": product_payload})

        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields: category"

    def test_failed_market_degrades_to_fallback(self, make_settings, product_payload):
        provider = RecordingProvider(fail_on={"Germany"})
        client = TestClient(create_app(settings=make_settings(), provider=provider))

        response = client.post("/api/analyze", json={"productData": product_payload})

        assert response.status_code == 200
        markets = response.json()["data"]["markets"]
        assert markets["United States"]["overallScore"] == 80
        assert markets["Germany"]["overallScore"] == 0
        assert markets["Germany"]["recommendation"] == "not-recommended"

    def test_upstream_timeout_end_to_end(self, make_settings, product_payload):
        client = TestClient(create_app(settings=make_settings()))

        with patch(
            "goglobal.infrastructure.llm.market_analysis_service.requests.post",
            side_effect=requests.Timeout("read timed out"),
        ) as post:
            response = client.post("/api/analyze", json={"productData": product_payload})

        assert response.status_code == 200
        markets = response.json()["data"]["markets"]
        assert post.call_count == 2
        for market in ("United States", "Germany"):
            assert markets[market]["overallScore"] == 0
            assert markets[market]["legalCompliance"]["regulations"] == [
                "Error: Unable to fetch regulatory information"
            ]

    def test_heuristic_provider_end_to_end(self, make_settings, product_payload):
        client = TestClient(create_app(settings=make_settings(provider="heuristic", api_key="")))

        response = client.post("/api/analyze", json={"productData": product_payload})

        assert response.status_code == 200
        us = response.json()["data"]["markets"]["United States"]
        assert us["verdict"] == "no-go"
        assert us["costBreakdown"]["breakEvenUnits"] == 2500


class TestInternalErrors:

    def test_masked_in_production(self, app, client, product_payload):
        app.state.orchestrator.analyze_product = AsyncMock(side_effect=RuntimeError("db password leaked"))

        response = client.post("/api/analyze", json={"productData": product_payload})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Internal server error"
        assert "stack" not in body
        assert "db password" not in response.text

    def test_detailed_in_development(self, make_settings, recording_provider, product_payload):
        app = create_app(settings=make_settings(environment="development"), provider=recording_provider)
        app.state.orchestrator.analyze_product = AsyncMock(side_effect=RuntimeError("boom"))

        response = TestClient(app).post("/api/analyze", json={"productData": product_payload})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "boom"
        assert "RuntimeError" in body["stack"]


class TestRateLimit:

    def test_limit_then_429(self, make_settings, recording_provider, product_payload):
        app = create_app(settings=make_settings(max_requests_per_minute=2), provider=recording_provider)
        client = TestClient(app)

        statuses = [
            client.post("/api/analyze", json={"productData": product_payload}).status_code
            for _ in range(2)
        ]
        denied = client.post("/api/analyze", json={"productData": product_payload})

        assert statuses == [200, 200]
        assert denied.status_code == 429
        assert denied.json()["error"] == "Rate limit exceeded. Please try again later."
        assert 1 <= int(denied.headers["Retry-After"]) <= 60
        assert recording_provider.calls.count("Germany") == 2

    def test_rejected_requests_count(self, make_settings):
        app = create_app(settings=make_settings(max_requests_per_minute=1), provider=RecordingProvider())
        client = TestClient(app)

        assert client.post("/api/analyze", json={}).status_code == 400
        assert client.post("/api/analyze", json={}).status_code == 429

    def test_window_rollover(self, app, client):
        now = [1000.0]
        app.state.rate_limiter = RateLimiter(
            InMemoryRateLimitStore(), limit=1, window_seconds=60, clock=lambda: now[0]
        )

        assert client.post("/api/analyze", json={}).status_code == 400
        assert client.post("/api/analyze", json={}).status_code == 429

        now[0] += 61

        assert client.post("/api/analyze", json={}).status_code == 400


class TestEchoEndpoint:

    def test_available_in_development(self, make_settings, recording_provider):
        app = create_app(settings=make_settings(environment="development"), provider=recording_provider)

        response = TestClient(app).post("/api/test", json={"hello": "world"})

        assert response.status_code == 200
        assert response.json()["receivedData"] == {"hello": "world"}
        assert response.json()["message"] == "Test endpoint working"

    def test_absent_in_production(self, client):
        assert client.post("/api/test", json={"hello": "world"}).status_code == 404


def test_lifespan_rejects_broken_settings(make_settings):
    app = create_app(settings=make_settings(api_key=""), provider=RecordingProvider())

    with pytest.raises(Exception, match="LLM_API_KEY"):
        with TestClient(app):
            pass

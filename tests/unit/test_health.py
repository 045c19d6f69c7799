"""Tests for the health check, CORS headers and the error envelope handlers."""

import pytest
from fastapi import APIRouter
from httpx import ASGITransport, AsyncClient

from speechcoach.api.app import create_app
from speechcoach.core.exceptions import DeviceUnavailableError


@pytest.fixture
def app():
    """Create a fresh FastAPI application with a few failing probe routes."""
    app = create_app()
    probe = APIRouter()

    @probe.get("/probe/domain")
    async def domain_error():
        raise DeviceUnavailableError("no input device")

    @probe.get("/probe/crash")
    async def crash():
        raise ZeroDivisionError("secret internals")

    @probe.get("/probe/validate")
    async def validate(count: int):
        return {"count": count}

    app.include_router(probe)
    return app


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------


async def test_health_returns_200(client):
    """GET /health returns 200 with status, version, and timestamp."""
    resp = await client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["version"] == "0.1.0"
    assert "timestamp" in body


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------


async def test_cors_allows_streamlit_origin(client):
    """Streamlit's default origin (localhost:8501) is in the CORS allow-list."""
    resp = await client.options(
        "/health",
        headers={"Origin": "http://localhost:8501", "Access-Control-Request-Method": "GET"},
    )
    assert resp.headers.get("access-control-allow-origin") == "http://localhost:8501"


async def test_cors_rejects_unknown_origin(client):
    resp = await client.options(
        "/health",
        headers={"Origin": "http://evil.example.com", "Access-Control-Request-Method": "GET"},
    )
    assert "access-control-allow-origin" not in resp.headers


# ---------------------------------------------------------------------------
# Error envelope
# ---------------------------------------------------------------------------


async def test_domain_error_uses_its_status(client):
    resp = await client.get("/probe/domain")

    assert resp.status_code == 503
    assert resp.json() == {
        "error": "Microphone is not available. Check the device and permissions.",
        "details": "no input device",
        "code": "DEVICE_UNAVAILABLE",
    }


async def test_validation_error_is_400(client):
    resp = await client.get("/probe/validate", params={"count": "many"})

    assert resp.status_code == 400
    assert resp.json()["code"] == "VALIDATION_ERROR"


async def test_unhandled_error_is_generic_500(client):
    resp = await client.get("/probe/crash")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error", "code": "INTERNAL_ERROR"}
    assert "secret" not in resp.text

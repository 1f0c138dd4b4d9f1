"""HTTP-level tests for the JaaS token endpoint."""
from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from telemed.core.config import get_settings
from telemed.main import app
from telemed.services.jaas_token import JaasTokenIssuer, get_issuer

TOKEN_URL = "/api/jaas/token"

DOCTOR_REQUEST = {
    "roomId": "consultation-appt-7",
    "userId": "doc-1",
    "userName": "Dr. Asha Rao",
    "userRole": "doctor",
}


@pytest.fixture
def use_settings():
    def _apply(settings):
        app.dependency_overrides[get_issuer] = lambda: JaasTokenIssuer(settings)
        app.dependency_overrides[get_settings] = lambda: settings

    yield _apply
    app.dependency_overrides.clear()


def _client() -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")


@pytest.mark.asyncio
async def test_post_issues_token(use_settings, jaas_settings):
    use_settings(jaas_settings)

    async with _client() as client:
        response = await client.post(TOKEN_URL, json=DOCTOR_REQUEST)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["token"].count(".") == 2
    assert body["roomName"] == f"{jaas_settings.jaas_app_id}/consultation-appt-7"
    assert body["userRole"] == "doctor"
    assert body["moderator"] is True
    assert body["domain"] == "8x8.vc"
    assert "expiresAt" in body
    assert response.headers["cache-control"] == "no-cache, no-store, must-revalidate"


@pytest.mark.asyncio
async def test_get_matches_post(use_settings, jaas_settings):
    use_settings(jaas_settings)
    params = {**DOCTOR_REQUEST, "userRole": "patient", "userId": "pat-3", "userEmail": ""}

    async with _client() as client:
        post = await client.post(TOKEN_URL, json=params)
        get = await client.get(TOKEN_URL, params=params)

    assert post.status_code == get.status_code == 200
    for key in ("roomName", "userRole", "moderator", "domain"):
        assert post.json()[key] == get.json()[key]
    assert get.json()["moderator"] is False


@pytest.mark.asyncio
async def test_missing_fields_return_400(use_settings, jaas_settings):
    use_settings(jaas_settings)

    async with _client() as client:
        response = await client.post(TOKEN_URL, json={"roomId": "room-1", "userId": "doc-1"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["kind"] == "validation_error"
    assert body["details"] == ["userName is required", "userRole is required"]


@pytest.mark.asyncio
async def test_non_object_body_is_rejected(use_settings, jaas_settings):
    use_settings(jaas_settings)

    async with _client() as client:
        response = await client.post(TOKEN_URL, json=["not", "an", "object"])

    assert response.status_code == 400
    assert response.json()["kind"] == "validation_error"


@pytest.mark.asyncio
async def test_configuration_details_shown_outside_production(use_settings, make_settings):
    use_settings(make_settings(jaas_key_id=""))

    async with _client() as client:
        response = await client.post(TOKEN_URL, json=DOCTOR_REQUEST)

    assert response.status_code == 500
    body = response.json()
    assert body["kind"] == "configuration_error"
    assert body["error"] == "JaaS server configuration error"
    assert "JAAS_KEY_ID is not configured" in body["details"]


@pytest.mark.asyncio
async def test_configuration_details_hidden_in_production(use_settings, make_settings):
    use_settings(make_settings(app_env="production", jaas_key_id=""))

    async with _client() as client:
        response = await client.post(TOKEN_URL, json=DOCTOR_REQUEST)

    assert response.status_code == 500
    assert "details" not in response.json()


@pytest.mark.asyncio
async def test_preflight_headers(use_settings, jaas_settings):
    use_settings(jaas_settings)

    async with _client() as client:
        response = await client.options(TOKEN_URL)

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == jaas_settings.cors_allow_origins[0]
    assert response.headers["access-control-allow-methods"] == "GET, POST, OPTIONS"
    assert response.headers["access-control-allow-headers"] == "Content-Type, Authorization"
    assert response.headers["access-control-allow-credentials"] == "true"
    assert response.headers["access-control-max-age"] == "86400"


@pytest.mark.asyncio
async def test_error_model_is_documented():
    async with _client() as client:
        response = await client.get("/openapi.json")

    responses = response.json()["paths"][TOKEN_URL]["post"]["responses"]
    assert responses["400"]["content"]["application/json"]["schema"]["$ref"].endswith("/TokenErrorResponse")
    assert "500" in responses

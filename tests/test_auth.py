"""Tests for the auth provider client and the current-user dependency."""

import httpx
import pytest
from httpx import AsyncClient, ASGITransport
from fastapi import Depends, FastAPI

from agroconnect.api.main import register_error_handlers
from agroconnect.api.security import get_auth_client, get_current_user
from agroconnect.auth import AuthClient, AuthUser
from agroconnect.config import AuthConfig

CONFIG = AuthConfig(api_url="https://auth.example.ng/", api_key="anon-key", timeout=5)


def provider(request: httpx.Request) -> httpx.Response:
    """Fake provider: accepts the token "good-token" only."""
    assert request.url == "https://auth.example.ng/auth/v1/user"
    assert request.headers["apikey"] == "anon-key"
    if request.headers.get("Authorization") == "Bearer html-token":
        return httpx.Response(200, text="<html>maintenance</html>")
    if request.headers.get("Authorization") == "Bearer good-token":
        return httpx.Response(200, json={"id": "user-1", "email": "chika@example.ng", "role": "authenticated"})
    return httpx.Response(401, json={"message": "invalid JWT"})


def test_user_endpoint():
    assert CONFIG.user_endpoint == "https://auth.example.ng/auth/v1/user"
    assert CONFIG.is_configured
    assert not AuthConfig(api_url="", api_key="").is_configured


@pytest.mark.asyncio
async def test_valid_token():
    async with AuthClient(CONFIG, transport=httpx.MockTransport(provider)) as client:
        user = await client.get_current_user("good-token")

    assert user == AuthUser(id="user-1", email="chika@example.ng")


@pytest.mark.asyncio
async def test_rejected_token():
    async with AuthClient(CONFIG, transport=httpx.MockTransport(provider)) as client:
        assert await client.get_current_user("bad-token") is None
        assert await client.get_current_user("") is None


@pytest.mark.asyncio
async def test_provider_unreachable():
    def unreachable(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with AuthClient(CONFIG, transport=httpx.MockTransport(unreachable)) as client:
        assert await client.get_current_user("good-token") is None


@pytest.mark.parametrize("reply", [
    httpx.Response(200, text="<html>maintenance</html>"),
    httpx.Response(200, json={}),
    httpx.Response(200, json=["user-1"]),
])
@pytest.mark.asyncio
async def test_unusable_user_payload(reply):
    """A 200 reply that is not a user counts as not signed in."""
    async with AuthClient(CONFIG, transport=httpx.MockTransport(lambda request: reply)) as client:
        assert await client.get_current_user("good-token") is None


@pytest.mark.asyncio
async def test_start_requires_configuration():
    client = AuthClient(AuthConfig(api_url="", api_key=""))

    with pytest.raises(ValueError):
        await client.start()


def test_client_not_started():
    client = AuthClient(CONFIG)

    assert client.is_started is False
    with pytest.raises(RuntimeError):
        client.client


@pytest.fixture
async def client():
    """App exposing the current user, backed by the fake provider."""
    auth_client = AuthClient(CONFIG, transport=httpx.MockTransport(provider))

    app = FastAPI()
    register_error_handlers(app)

    @app.get("/me")
    async def me(user: AuthUser = Depends(get_current_user)):
        return {"id": user.id}

    app.dependency_overrides[get_auth_client] = lambda: auth_client

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    await auth_client.close()


@pytest.mark.asyncio
async def test_dependency_resolves_user(client):
    response = await client.get("/me", headers={"Authorization": "Bearer good-token"})

    assert response.status_code == 200
    assert response.json() == {"id": "user-1"}


@pytest.mark.asyncio
async def test_dependency_rejects_bad_or_missing_token(client):
    response = await client.get("/me", headers={"Authorization": "Bearer bad-token"})
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}

    response = await client.get("/me")
    assert response.status_code == 401

    response = await client.get("/me", headers={"Authorization": "Bearer html-token"})
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}

import json

import httpx
import pytest
from httpx import AsyncClient

from reliefhub.app.main import app
from reliefhub.app.services.auth_provider import (
    AuthProviderClient,
    get_auth_provider,
    user_role,
)

PROVIDER_URL = "https://auth.example.test"
API_KEY = "public-anon-key"


class ProviderStub:
    """httpx MockTransport handler recording requests"""

    def __init__(self, status_code: int = 200, payload: dict | None = None, error: Exception | None = None):
        self.status_code = status_code
        self.payload = payload if payload is not None else {"access_token": "tok", "user": {"id": "u1"}}
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json=self.payload)


@pytest.fixture
def provider_stub():
    return ProviderStub()


@pytest.fixture
def use_provider(client):
    """Point the auth endpoints at a stubbed provider"""
    def _use(stub: ProviderStub | None):
        if stub is None:
            app.dependency_overrides[get_auth_provider] = lambda: None
            return
        app.dependency_overrides[get_auth_provider] = lambda: AuthProviderClient(
            PROVIDER_URL, API_KEY, transport=httpx.MockTransport(stub)
        )
    return _use


async def _solved_captcha(client: AsyncClient, load_session) -> dict:
    challenge = (await client.get("/captcha")).json()
    answer = (await load_session(challenge["sessionId"])).answer
    return {"sessionId": challenge["sessionId"], "userAnswer": answer}


@pytest.mark.asyncio
async def test_sign_in_delegates_after_captcha(client: AsyncClient, load_session, use_provider, provider_stub):
    use_provider(provider_stub)
    captcha = await _solved_captcha(client, load_session)

    response = await client.post(
        "/auth/sign-in",
        json={"email": "field.worker@example.org", "password": "secret123", **captcha},
    )

    assert response.status_code == 200
    assert response.json() == {"role": "user", "provider": provider_stub.payload}

    [request] = provider_stub.requests
    assert request.url.path == "/auth/v1/token"
    assert request.url.params["grant_type"] == "password"
    assert request.headers["apikey"] == API_KEY
    assert json.loads(request.content) == {"email": "field.worker@example.org", "password": "secret123"}

    assert (await load_session(captcha["sessionId"])).verified is True


@pytest.mark.asyncio
async def test_sign_up_sends_full_name(client: AsyncClient, load_session, use_provider, provider_stub):
    use_provider(provider_stub)
    captcha = await _solved_captcha(client, load_session)

    response = await client.post(
        "/auth/sign-up",
        json={
            "email": "coordinator@g.bracu.ac.bd",
            "password": "secret123",
            "fullName": "Relief Coordinator",
            **captcha,
        },
    )

    assert response.status_code == 200
    assert response.json()["role"] == "admin"

    [request] = provider_stub.requests
    assert request.url.path == "/auth/v1/signup"
    assert json.loads(request.content)["data"] == {"full_name": "Relief Coordinator"}


@pytest.mark.asyncio
async def test_wrong_captcha_blocks_sign_in(client: AsyncClient, load_session, use_provider, provider_stub):
    use_provider(provider_stub)
    captcha = await _solved_captcha(client, load_session)
    captcha["userAnswer"] += 1

    response = await client.post(
        "/auth/sign-in",
        json={"email": "a@example.org", "password": "secret123", **captcha},
    )

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Incorrect captcha answer"}
    assert provider_stub.requests == []


@pytest.mark.asyncio
async def test_used_captcha_blocks_sign_in(client: AsyncClient, load_session, use_provider, provider_stub):
    use_provider(provider_stub)
    captcha = await _solved_captcha(client, load_session)
    body = {"email": "a@example.org", "password": "secret123", **captcha}

    assert (await client.post("/auth/sign-in", json=body)).status_code == 200
    replay = await client.post("/auth/sign-in", json=body)

    assert replay.status_code == 400
    assert replay.json()["error"] == "Captcha already used"
    assert len(provider_stub.requests) == 1


@pytest.mark.asyncio
async def test_missing_captcha_fields(client: AsyncClient, use_provider, provider_stub):
    use_provider(provider_stub)

    response = await client.post(
        "/auth/sign-in", json={"email": "a@example.org", "password": "secret123"}
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Missing sessionId or userAnswer"


@pytest.mark.asyncio
async def test_invalid_email_is_a_client_error(client: AsyncClient, use_provider, provider_stub):
    use_provider(provider_stub)

    response = await client.post(
        "/auth/sign-in",
        json={"email": "not-an-email", "password": "secret123", "sessionId": "x", "userAnswer": 1},
    )

    assert response.status_code == 400
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_provider_rejection_maps_to_401(client: AsyncClient, load_session, use_provider):
    use_provider(ProviderStub(400, {"error": "invalid_grant", "error_description": "Invalid login credentials"}))
    captcha = await _solved_captcha(client, load_session)

    response = await client.post(
        "/auth/sign-in",
        json={"email": "a@example.org", "password": "wrongpass", **captcha},
    )

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Invalid login credentials"}


@pytest.mark.asyncio
async def test_provider_unreachable_maps_to_502(client: AsyncClient, load_session, use_provider):
    use_provider(ProviderStub(error=httpx.ConnectError("connection refused")))
    captcha = await _solved_captcha(client, load_session)

    response = await client.post(
        "/auth/sign-in",
        json={"email": "a@example.org", "password": "secret123", **captcha},
    )

    assert response.status_code == 502
    assert response.json() == {"error": "Authentication provider unavailable"}


@pytest.mark.asyncio
async def test_provider_not_configured(client: AsyncClient, load_session, use_provider):
    use_provider(None)
    captcha = await _solved_captcha(client, load_session)

    response = await client.post(
        "/auth/sign-up",
        json={"email": "a@example.org", "password": "secret123", "fullName": "A", **captcha},
    )

    assert response.status_code == 503
    assert response.json() == {"error": "Authentication provider is not configured"}
    assert (await load_session(captcha["sessionId"])).verified is False


@pytest.mark.asyncio
async def test_unconfigured_provider_keeps_captcha_for_retry(client: AsyncClient, load_session, use_provider, provider_stub):
    use_provider(None)
    captcha = await _solved_captcha(client, load_session)
    body = {"email": "a@example.org", "password": "secret123", **captcha}

    assert (await client.post("/auth/sign-in", json=body)).status_code == 503

    use_provider(provider_stub)
    response = await client.post("/auth/sign-in", json=body)

    assert response.status_code == 200
    assert (await load_session(captcha["sessionId"])).verified is True


@pytest.mark.parametrize(
    "email, role",
    [
        ("coordinator@g.bracu.ac.bd", "admin"),
        ("Coordinator@G.BRACU.AC.BD", "admin"),
        ("volunteer@gmail.com", "user"),
        ("g.bracu.ac.bd@example.org", "user"),
    ],
)
def test_user_role(email, role):
    assert user_role(email) == role

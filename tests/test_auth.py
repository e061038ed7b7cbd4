import pytest

from app.services.kv_store import InMemoryKVStore
from app.services.tokens import TokenIssuer
from app.utils.exceptions import StoreError


async def _register(client, username="alice", password="s3cret"):
    return await client.post(
        "/api/auth",
        json={"action": "register", "username": username, "password": password},
    )


async def _login(client, username="alice", password="s3cret"):
    return await client.post(
        "/api/auth",
        json={"action": "login", "username": username, "password": password},
    )


@pytest.mark.asyncio
async def test_register_success(client):
    response = await _register(client)

    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "User registered successfully."
    assert data["userId"]
    assert "password" not in response.text


@pytest.mark.asyncio
async def test_register_duplicate_username(client):
    await _register(client)
    response = await _register(client, password="other")

    assert response.status_code == 409
    assert response.json() == {"error": "User already exists."}


@pytest.mark.asyncio
async def test_login_valid_credentials(client, issuer):
    registered = await _register(client)
    response = await _login(client)

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Login successful."
    assert data["userId"] == registered.json()["userId"]

    claims = issuer.verify(data["token"])
    assert claims.user_id == data["userId"]
    assert claims.username == "alice"


@pytest.mark.asyncio
async def test_login_invalid_password(client):
    await _register(client)
    response = await _login(client, password="wrong")

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid username or password."}


@pytest.mark.asyncio
async def test_login_nonexistent_user_matches_wrong_password(client):
    await _register(client)
    wrong_password = await _login(client, password="wrong")
    unknown_user = await _login(client, username="mallory", password="anything")

    assert unknown_user.status_code == wrong_password.status_code == 401
    assert unknown_user.json() == wrong_password.json()


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"action": "register", "username": "alice"},
    {"action": "login", "password": "s3cret"},
    {"action": "login", "username": "", "password": "s3cret"},
    {"action": "bogus"},
    {},
])
async def test_missing_credentials(client, body):
    response = await client.post("/api/auth", json=body)

    assert response.status_code == 400
    assert response.json() == {"error": "Username and password are required."}


@pytest.mark.asyncio
async def test_missing_body(client):
    response = await client.post("/api/auth")

    assert response.status_code == 400
    assert response.json() == {"error": "Username and password are required."}


@pytest.mark.asyncio
@pytest.mark.parametrize("action", ["logout", None, "REGISTER"])
async def test_invalid_action(client, action):
    response = await client.post(
        "/api/auth",
        json={"action": action, "username": "alice", "password": "s3cret"},
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid action specified")


@pytest.mark.asyncio
async def test_non_json_body_is_bad_request(client):
    response = await client.post(
        "/api/auth",
        content=b"not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert "error" in response.json()


@pytest.mark.asyncio
async def test_get_not_allowed(client):
    response = await client.get("/api/auth")

    assert response.status_code == 405
    assert response.json() == {"error": "Method Not Allowed"}


@pytest.mark.asyncio
async def test_store_failure_returns_500(client, monkeypatch):
    async def failing_get(self, key):
        raise StoreError("KV operation failed", details="connection refused")

    monkeypatch.setattr(InMemoryKVStore, "get", failing_get)
    response = await _login(client)

    assert response.status_code == 500
    assert response.json() == {
        "error": "Internal server error during authentication.",
        "details": "connection refused",
    }


@pytest.mark.asyncio
async def test_full_scenario(client):
    response = await _register(client, "alice", "s3cret")
    assert response.status_code == 201
    assert response.json()["userId"]

    response = await _login(client, "alice", "s3cret")
    assert response.status_code == 200
    assert response.json()["token"]

    response = await _login(client, "alice", "wrong")
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid username or password."

    response = await _register(client, "alice", "other")
    assert response.status_code == 409
    assert response.json()["error"] == "User already exists."


@pytest.mark.asyncio
async def test_unexpected_failure_returns_auth_error_with_details(client, monkeypatch):
    def broken_issue(self, user_id, username, expires_delta=None):
        raise RuntimeError("signing backend unavailable")

    monkeypatch.setattr(TokenIssuer, "issue", broken_issue)
    await _register(client)
    response = await _login(client)

    assert response.status_code == 500
    assert response.json() == {
        "error": "Internal server error during authentication.",
        "details": "RuntimeError",
    }

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.dependencies import get_auth_service
from app.main import app
from app.services.auth_service import AuthService
from app.services.kv_store import InMemoryKVStore
from app.services.passwords import PasswordHasher
from app.services.tokens import TokenIssuer

TEST_SECRET = "test-signing-secret"


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    # Open proxy endpoints and no upstream keys unless a test opts in
    from app.config import settings
    monkeypatch.setattr(settings, "require_auth", False)
    monkeypatch.setattr(settings, "openai_api_key", "")
    monkeypatch.setattr(settings, "google_api_key", "")


@pytest.fixture
def store():
    return InMemoryKVStore()


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def issuer():
    return TokenIssuer(TEST_SECRET)


@pytest.fixture
def auth_service(store, hasher, issuer):
    return AuthService(store, hasher, issuer)


@pytest_asyncio.fixture
async def client(auth_service):
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()

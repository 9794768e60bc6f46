"""
Global pytest fixtures for the Catalog Platform test suite.

Responsibilities:
    - Provide a fresh FastAPI TestClient via the app factory for integration tests
    - Provide isolated in-memory stores for direct testing
    - Provide a CatalogManager fixture wired to the storage fixture
    - Provide a registered user and bearer-token headers for write routes

Why an app factory?
    Using `create_app()` ensures each test gets fresh in-memory state,
    eliminating cross-test flakiness.
"""

import pytest
from fastapi.testclient import TestClient

from auth.config import AuthConfig
from auth.service import AuthService, TokenService
from catalog_platform.manager.catalog_manager import CatalogManager
from catalog_platform.storage.storage import CredentialStorage, Storage
from catalog_platform.storage.storage_factory import Stores
from main import create_app

TEST_SECRET = "test-secret"


@pytest.fixture
def auth_config() -> AuthConfig:
    return AuthConfig(secret=TEST_SECRET, algorithm="HS256", expire_minutes=5)


@pytest.fixture
def storage() -> Storage:
    """Provide a fresh in-memory product store."""
    return Storage()


@pytest.fixture
def credential_storage() -> CredentialStorage:
    """Provide a fresh in-memory credential store."""
    return CredentialStorage()


@pytest.fixture
def manager(storage: Storage) -> CatalogManager:
    """Provide a CatalogManager wired to the storage fixture."""
    return CatalogManager(storage=storage)


@pytest.fixture
def tokens(auth_config: AuthConfig) -> TokenService:
    return TokenService(auth_config)


@pytest.fixture
def auth_service(credential_storage: CredentialStorage, tokens: TokenService) -> AuthService:
    return AuthService(store=credential_storage, tokens=tokens)


@pytest.fixture
def app(storage: Storage, credential_storage: CredentialStorage, auth_config: AuthConfig):
    """
    Provide a new app instance over the storage fixtures.

    Tests can seed or inspect `storage` directly while talking HTTP to the app.
    """
    stores = Stores(backend="memory", catalog=storage, credentials=credential_storage)
    return create_app(stores=stores, auth_config=auth_config)


@pytest.fixture
def client(app) -> TestClient:
    """Provide a fresh TestClient with a new app instance."""
    return TestClient(app)


@pytest.fixture
def auth_headers(client: TestClient) -> dict:
    """Register a user through the API, log in, and return bearer headers."""
    creds = {"username": "alice", "password": "s3cret"}
    assert client.post("/auth/register", json=creds).status_code == 201
    token = client.post("/auth/login", json=creds).json()["token"]
    return {"Authorization": f"Bearer {token}"}

# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up test environment variables before any imports
# - Wires services and the FastAPI app to in-memory adapters (tests/fakes.py)
# - No test needs Postgres, Redis or an OpenAI key
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# Settings reads these when it is constructed

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("JWT_SECRET", "test-secret-key-0123456789")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ["CONFIG_FILE"] = "tests/no-such-config.yaml"

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.dependencies import build_services
from app.main import create_app
from tests.fakes import FakeCache, FakeEmbeddings, FakeStore


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def settings():
    """Settings with test credentials and a short semantic-search timeout."""
    return Settings(
        SUPABASE_URL="https://test-project.supabase.co",
        SUPABASE_SERVICE_KEY="test-service-key",
        JWT_SECRET="test-secret-key-0123456789",
        OPENAI_API_KEY="",
        SEMANTIC_SEARCH_TIMEOUT_SECONDS=0.2,
    )


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def cache():
    return FakeCache()


@pytest.fixture
def embeddings():
    return FakeEmbeddings()


@pytest.fixture
def services(settings, store, cache, embeddings):
    """The full service graph over in-memory adapters."""
    return build_services(settings, store, cache, embeddings)


@pytest.fixture
def seller(store):
    return store.seed_user("alice")


@pytest.fixture
def buyer(store):
    return store.seed_user("bob")


@pytest.fixture
def product(store, seller):
    """Priced 10.00 with 5 in stock."""
    return store.seed_product(seller["id"])


@pytest.fixture
def app(settings, store, cache, embeddings):
    return create_app(settings, store=store, cache=cache, embeddings=embeddings)


@pytest.fixture
def client(app):
    """TestClient with the lifespan running (services wired on startup)."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register_and_login(client, settings):
    """Create an account over HTTP and return (user, auth headers)."""
    prefix = settings.API_PREFIX

    def _register_and_login(username: str, password: str = "correct-horse-42"):
        response = client.post(f"{prefix}/auth/register", json={
            "email": f"{username}@example.com",
            "username": username,
            "password": password,
        })
        assert response.status_code == 201, response.text
        user = response.json()

        response = client.post(f"{prefix}/auth/login", json={"identifier": username, "password": password})
        assert response.status_code == 200, response.text
        headers = {"Authorization": f"Bearer {response.json()['access_token']}"}
        return user, headers

    return _register_and_login

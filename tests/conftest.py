"""Shared pytest fixtures.

Settings are read once at import time, so the environment is prepared
before anything from `app` is imported.
"""

import os

os.environ["JWT_SECRET"] = "test-jwt-secret-for-testing-only"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["SEED_DEMO_DATA"] = "false"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.database import (  # noqa: E402
    create_db_and_tables,
    get_sweet_repo,
    get_user_repo,
    make_engine,
)
from app.main import app  # noqa: E402
from app.repositories.sweet_repo import (  # noqa: E402
    InMemorySweetRepository,
    SqlSweetRepository,
)
from app.repositories.user_repo import (  # noqa: E402
    InMemoryUserRepository,
    SqlUserRepository,
)

ADMIN_EMAIL = "admin@example.com"
CUSTOMER_EMAIL = "customer@example.com"
PASSWORD = "secret123"


@pytest.fixture
def user_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def sweet_repo() -> InMemorySweetRepository:
    return InMemorySweetRepository()


@pytest.fixture
def client(user_repo, sweet_repo):
    """Test client whose stores are fresh in-memory repositories."""
    app.dependency_overrides[get_user_repo] = lambda: user_repo
    app.dependency_overrides[get_sweet_repo] = lambda: sweet_repo
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _register(client: TestClient, email: str, role: str) -> dict:
    response = client.post(
        "/api/auth/register",
        json={"email": email, "password": PASSWORD, "role": role},
    )
    assert response.status_code == 201, (
        f"Registration failed: {response.status_code} - {response.text}"
    )
    return response.json()


@pytest.fixture
def admin(client) -> dict:
    """Registered admin: {user, token, headers}."""
    data = _register(client, ADMIN_EMAIL, "admin")
    data["headers"] = {"Authorization": f"Bearer {data['token']}"}
    return data


@pytest.fixture
def customer(client) -> dict:
    """Registered customer: {user, token, headers}."""
    data = _register(client, CUSTOMER_EMAIL, "user")
    data["headers"] = {"Authorization": f"Bearer {data['token']}"}
    return data


@pytest.fixture
def sql_engine():
    """Fresh in-memory SQLite database with all tables."""
    engine = make_engine("sqlite://")
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def any_sweet_repo(request, sql_engine):
    """Each inventory store implementation, for contract tests."""
    if request.param == "memory":
        return InMemorySweetRepository()
    return SqlSweetRepository(sql_engine)


@pytest.fixture(params=["memory", "sql"])
def any_user_repo(request, sql_engine):
    """Each credential store implementation, for contract tests."""
    if request.param == "memory":
        return InMemoryUserRepository()
    return SqlUserRepository(sql_engine)

"""Pytest fixtures and configuration for EcoLog tests."""

import pytest
from datetime import datetime
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from ecolog.database.database import Base, build_engine, build_session_factory, init_db
from ecolog.database.action_repository import ActionRepository
from ecolog.database.user_repository import UserRepository
from ecolog.models.user import User, AccountType
from ecolog.storage.database import DatabaseStorage
from ecolog.storage.memory import InMemoryStorage


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture
def test_user_id():
    """Test user ID."""
    return "test-user-123"


def make_user(user_id: str, **overrides) -> User:
    """Build a User with sensible defaults."""
    now = datetime.utcnow()
    data = {
        "id": user_id,
        "email": f"{user_id}@example.com",
        "first_name": "Test",
        "last_name": "User",
        "account_type": AccountType.INDIVIDUAL,
        "created_at": now,
        "updated_at": now,
    }
    data.update(overrides)
    return User(**data)


@pytest.fixture
def test_user(test_user_id):
    """Create a test user object."""
    return make_user(test_user_id)


@pytest.fixture
def sql_engine():
    """In-memory SQLite engine shared across threads, schema created fresh per test."""
    engine = build_engine(TEST_DATABASE_URL, poolclass=StaticPool, echo=False)
    init_db(engine, TEST_DATABASE_URL)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db_session(sql_engine, test_user):
    """Database session with the test user already stored."""
    session = build_session_factory(sql_engine)()
    UserRepository(session).create_or_update(test_user)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def action_repository(db_session: Session):
    """Create an ActionRepository instance for testing."""
    return ActionRepository(db_session)


@pytest.fixture
def user_repository(db_session: Session):
    """Create a UserRepository instance for testing."""
    return UserRepository(db_session)


@pytest.fixture(params=["memory", "sql"])
def storage(request, test_user):
    """Every storage backend, each holding the test user."""
    if request.param == "memory":
        store = InMemoryStorage()
    else:
        engine = request.getfixturevalue("sql_engine")
        store = DatabaseStorage(build_session_factory(engine), engine=engine)
    store.upsert_user(test_user)
    return store


@pytest.fixture
def api_client(storage):
    """FastAPI test client running against the `storage` fixture with real bearer auth."""
    from ecolog.api.app import app

    app.state.storage = storage
    with TestClient(app) as client:
        yield client
    app.state.storage = None


@pytest.fixture
def test_client(api_client, storage, test_user_id):
    """Test client with authentication overridden to the test user."""
    from ecolog.api.app import app
    from ecolog.auth.dependencies import get_current_user

    def override_get_current_user():
        return storage.get_user(test_user_id)

    app.dependency_overrides[get_current_user] = override_get_current_user
    yield api_client
    app.dependency_overrides.clear()


@pytest.fixture
def user_factory():
    """Factory for User objects: user_factory("id", **overrides)."""
    return make_user

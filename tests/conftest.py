"""Shared pytest fixtures for all test suites."""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from backend.app.api.deps import Store, create_memory_store, get_store
from backend.app.db.models import Base
from backend.app.main import app


@pytest.fixture
def store() -> Store:
    """Fresh in-memory store per test."""
    return create_memory_store()


@pytest.fixture
def client(store: Store) -> Generator[TestClient, None, None]:
    """Test client wired to the per-test in-memory store."""
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": "Bearer user-1"}


@pytest.fixture
def sqlite_session_factory() -> Generator[sessionmaker[Session], None, None]:
    """Session factory over a shared in-memory sqlite database.

    Usage:
        def test_something(sqlite_session_factory):
            with sqlite_session_factory() as session:
                # ... test code
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    yield sessionmaker(bind=engine, expire_on_commit=False)

    Base.metadata.drop_all(engine)
    engine.dispose()

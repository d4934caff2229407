"""Shared fixtures: an in-memory SQLite ledger and an API client bound to it."""

import os

# Must be set before splitnest.database is imported.
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import splitnest.models  # noqa: F401
from splitnest import ledger
from splitnest.database import Base, get_db
from splitnest.store import SqlAlchemyLedgerStore


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def store(db):
    return SqlAlchemyLedgerStore(db)


@pytest.fixture
def people(store):
    """Alex, Maya and Jordan, keyed by name."""
    created = ledger.add_participants(store, ["Alex", "Maya", "Jordan"])
    return {p["name"]: p["id"] for p in created}


@pytest.fixture
def client(session_factory, monkeypatch):
    monkeypatch.delenv("ADMIN_TOKEN", raising=False)

    from splitnest.main import app
    from splitnest.ratelimit import limiter

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    limiter.reset()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

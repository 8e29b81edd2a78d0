"""Shared fixtures: a fresh in-memory database per test and per-role clients."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from cafe import auth, crud
from cafe.db import Base, get_db, make_engine
from cafe.main import app
from tests.helpers import register


@pytest.fixture
def db_session():
    engine = make_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSession()
    crud.seed_menu(db)
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def make_client(db_session):
    """Factory for clients that each carry their own cookie jar."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    auth.sessions.clear()
    clients = []

    def _make():
        client = TestClient(app)
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()
    app.dependency_overrides.clear()
    auth.sessions.clear()


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def customer_client(make_client):
    client = make_client()
    register(client, "+10000000001", name="Customer")
    return client


@pytest.fixture
def kitchen_client(make_client):
    client = make_client()
    register(client, "+10000000099", role="kitchen_staff", name="Chef")
    return client

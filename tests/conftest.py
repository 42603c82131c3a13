"""Shared fixtures: in-memory database, API client and registered users.

Every test gets a fresh in-memory SQLite database; the ``get_db`` dependency
is overridden so requests and service calls share that database.
"""

import os

os.environ.setdefault("HOMELEDGER_DATABASE_URL", "sqlite://")
os.environ.setdefault("HOMELEDGER_BCRYPT_ROUNDS", "4")
os.environ.setdefault("HOMELEDGER_SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from homeledger.api.deps import get_db
from homeledger.db.base import Base
from homeledger.main import app

PASSWORD = "Secret123"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    """FastAPI test client with the DB dependency overridden."""
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def signup_payload(email: str, **overrides) -> dict:
    payload = {
        "email": email,
        "password": PASSWORD,
        "first_name": "Mario",
        "last_name": "Rossi",
        "birth_date": date(date.today().year - 30, 5, 17).isoformat(),
    }
    payload.update(overrides)
    return payload


def register(client: TestClient, email: str, **overrides) -> dict:
    """Sign up ``email`` and return bearer headers for it."""
    r = client.post("/auth/signup", json=signup_payload(email, **overrides))
    assert r.status_code == 201, r.text
    return login(client, email, overrides.get("password", PASSWORD))


def login(client: TestClient, email: str, password: str = PASSWORD) -> dict:
    r = client.post("/auth/token", data={"username": email, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


def user_id(client: TestClient, headers: dict) -> str:
    return client.get("/users/me", headers=headers).json()["id"]


@pytest.fixture
def head(client):
    return register(client, "head@example.com", first_name="Anna", last_name="Bianchi")


@pytest.fixture
def family(client, head):
    r = client.post("/families/", json={"surname": "Bianchi"}, headers=head)
    assert r.status_code == 201, r.text
    return r.json()


def join(client: TestClient, family: dict, email: str, role: str | None = None, head_headers: dict | None = None) -> dict:
    """Register ``email``, join ``family`` and optionally promote to ``role``."""
    headers = register(client, email)
    r = client.post("/families/join", json={"invite_code": family["invite_code"]}, headers=headers)
    assert r.status_code == 200, r.text
    if role:
        r = client.patch(f"/families/{family['id']}/members/{r.json()['user_id']}",
                         json={"role": role}, headers=head_headers)
        assert r.status_code == 200, r.text
    return headers


@pytest.fixture
def member(client, family):
    return join(client, family, "member@example.com")


@pytest.fixture
def worker(client, family, head):
    return join(client, family, "worker@example.com", role="WORKER", head_headers=head)

"""Shared pytest fixtures: an in-memory database, API clients per role and record factories."""

import os
from datetime import date
from decimal import Decimal

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SESSION_SECRET_KEY", "test-session-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fastapi_app import app
from moderno.database import Base, get_db
from moderno.models import Client, Transaction, User
from moderno.utils.auth import get_password_hash

PASSWORD = "correct-horse-battery"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def users(session_factory):
    """One account per role, all sharing PASSWORD."""
    session = session_factory()
    accounts = {}
    for role in ("admin", "manager", "viewer"):
        user = User(
            username=role,
            password_hash=get_password_hash(PASSWORD),
            full_name=role.title(),
            role=role,
            is_active=True,
        )
        session.add(user)
        accounts[role] = user
    session.commit()
    ids = {role: user.id for role, user in accounts.items()}
    session.close()
    return ids


@pytest.fixture
def anonymous(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


def _login(client: TestClient, username: str) -> TestClient:
    response = client.post("/api/auth/login", json={"username": username, "password": PASSWORD})
    assert response.status_code == 200, response.text
    return client


@pytest.fixture
def login(anonymous, users):
    """Log the shared TestClient in as the given role."""

    def _apply(role: str) -> TestClient:
        anonymous.cookies.clear()
        return _login(anonymous, role)

    return _apply


@pytest.fixture
def api(login):
    """TestClient logged in as admin."""
    return login("admin")


@pytest.fixture
def make_client(db):
    """Insert a client row directly, bypassing the API and its recomputes."""
    counter = {"n": 0}

    def _make(**overrides) -> Client:
        counter["n"] += 1
        values = {
            "first_name": "Lan",
            "last_name": f"Nguyen{counter['n']}",
            "email": f"client{counter['n']}@example.com",
        }
        values.update(overrides)
        client = Client(**values)
        db.add(client)
        db.commit()
        db.refresh(client)
        return client

    return _make


@pytest.fixture
def make_transaction(db):
    """Insert a transaction row directly, without touching client totals."""

    def _make(client: Client, amount="100", type="payment", status="completed", **overrides) -> Transaction:
        values = {
            "client_id": client.id,
            "amount": Decimal(amount),
            "type": type,
            "status": status,
            "title": f"{type} {amount}",
            "payment_date": date(2026, 1, 15),
        }
        values.update(overrides)
        transaction = Transaction(**values)
        db.add(transaction)
        db.commit()
        db.refresh(transaction)
        return transaction

    return _make


@pytest.fixture
def create_client_via_api(api):
    counter = {"n": 0}

    def _create(**overrides) -> dict:
        counter["n"] += 1
        body = {
            "firstName": "Minh",
            "lastName": f"Tran{counter['n']}",
            "email": f"api-client{counter['n']}@example.com",
        }
        body.update(overrides)
        response = api.post("/api/clients", json=body)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def create_transaction_via_api(api):
    def _create(client_id: int, amount: str, type: str = "payment", status: str = "completed", **overrides) -> dict:
        body = {
            "clientId": client_id,
            "amount": amount,
            "type": type,
            "status": status,
            "title": f"{type} {amount}",
            "paymentDate": "2026-03-01",
        }
        body.update(overrides)
        response = api.post("/api/transactions", json=body)
        assert response.status_code == 201, response.text
        return response.json()

    return _create

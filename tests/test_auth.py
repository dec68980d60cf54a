import pytest
from fastapi.testclient import TestClient

from edura_finance.app.core.security import decode_access_token
from edura_finance.app.core.settings import get_settings
from edura_finance.app.db.base import Base
from edura_finance.app.db.session import SessionLocal, engine
from edura_finance.app.main import app
from edura_finance.app.models.user import User


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def register_user(client: TestClient, email: str, password: str, role: str | None = None):
    payload = {"email": email, "password": password}
    if role is not None:
        payload["role"] = role
    return client.post("/auth/register", json=payload)


def test_successful_registration_returns_user():
    client = TestClient(app)
    response = register_user(client, "user@example.com", "secret")
    assert response.status_code == 200
    data = response.json()
    assert data["email"] == "user@example.com"
    assert data["role"] == "student"
    assert "hashed_password" not in data
    assert isinstance(data.get("id"), int)


def test_duplicate_email_returns_400():
    client = TestClient(app)
    assert register_user(client, "dup@example.com", "secret").status_code == 200
    assert register_user(client, "dup@example.com", "secret").status_code == 400


def test_user_persisted_with_hashed_password():
    client = TestClient(app)
    register_user(client, "persist@example.com", "secret", role="teacher")

    with SessionLocal() as db:
        user = db.query(User).filter(User.email == "persist@example.com").first()
        assert user is not None
        assert user.role == "teacher"
        assert user.hashed_password and user.hashed_password != "secret"


def test_successful_login_returns_token():
    client = TestClient(app)
    register_user(client, "login@example.com", "secret")
    response = client.post("/auth/login", json={"email": "login@example.com", "password": "secret"})
    assert response.status_code == 200
    data = response.json()
    assert data.get("token_type") == "bearer"
    assert data.get("role") == "student"
    assert isinstance(data.get("access_token"), str) and data["access_token"]


def test_wrong_password_returns_400():
    client = TestClient(app)
    register_user(client, "wrongpw@example.com", "secret")
    response = client.post("/auth/login", json={"email": "wrongpw@example.com", "password": "bad"})
    assert response.status_code == 400


def test_inactive_user_cannot_login():
    client = TestClient(app)
    register_user(client, "inactive@example.com", "secret")
    with SessionLocal() as db:
        user = db.query(User).filter(User.email == "inactive@example.com").first()
        user.is_active = False
        db.commit()
    response = client.post("/auth/login", json={"email": "inactive@example.com", "password": "secret"})
    assert response.status_code == 400


def test_me_returns_current_user():
    client = TestClient(app)
    register_user(client, "me@example.com", "secret")
    token = client.post("/auth/login", json={"email": "me@example.com", "password": "secret"}).json()["access_token"]
    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["email"] == "me@example.com"


def test_me_rejects_bad_token():
    client = TestClient(app)
    response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_self_registration_cannot_claim_manager_role():
    client = TestClient(app)
    response = register_user(client, "sneaky@example.com", "secret", role="manager")
    assert response.status_code == 422
    with SessionLocal() as db:
        assert db.query(User).filter(User.email == "sneaky@example.com").first() is None


def test_token_carries_role_claim():
    client = TestClient(app)
    register_user(client, "claims@example.com", "secret", role="teacher")
    token = client.post("/auth/login", json={"email": "claims@example.com", "password": "secret"}).json()["access_token"]
    assert decode_access_token(token)["role"] == "teacher"


def test_create_manager_requires_matching_secret(monkeypatch):
    client = TestClient(app)
    monkeypatch.setattr(get_settings(), "manager_secret_key", "center-secret")
    payload = {"email": "boss@example.com", "password": "longenough", "full_name": "Boss", "secret_key": "wrong"}

    assert client.post("/auth/create-manager", json=payload).status_code == 401

    payload["secret_key"] = "center-secret"
    response = client.post("/auth/create-manager", json=payload)
    assert response.status_code == 201
    assert response.json()["role"] == "manager"


def test_create_manager_disabled_without_configured_secret(monkeypatch):
    client = TestClient(app)
    monkeypatch.setattr(get_settings(), "manager_secret_key", "")
    payload = {"email": "boss@example.com", "password": "longenough", "full_name": "Boss", "secret_key": ""}
    assert client.post("/auth/create-manager", json=payload).status_code == 401

from datetime import timedelta

from conftest import create_user, auth_headers
from utils.security import create_access_token


def test_register_returns_token_and_user(client):
    response = client.post("/api/auth/register", json={
        "name": "Asha",
        "email": "Asha@Example.com",
        "password": "secret123",
    })

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "User registered successfully"
    assert body["token"]
    assert body["user"]["email"] == "asha@example.com"
    assert body["user"]["role"] == "user"
    assert "hashed_password" not in body["user"]


def test_register_rejects_duplicate_email(client, user):
    response = client.post("/api/auth/register", json={
        "name": "Someone",
        "email": "user@example.com",
        "password": "secret123",
    })

    assert response.status_code == 400
    assert response.json()["detail"] == "User already exists with this email"


def test_register_rejects_short_password(client):
    response = client.post("/api/auth/register", json={"name": "A", "email": "a@example.com", "password": "123"})
    assert response.status_code == 422


def test_login_and_verify(client, user):
    response = client.post("/api/auth/login", json={"email": "user@example.com", "password": "secret123"})
    assert response.status_code == 200
    token = response.json()["token"]

    verify = client.get("/api/auth/verify", headers={"Authorization": f"Bearer {token}"})
    assert verify.status_code == 200
    assert verify.json()["user"] == {
        "id": user.id,
        "name": "Test User",
        "email": "user@example.com",
        "role": "user",
    }


def test_login_with_wrong_password(client, user):
    response = client.post("/api/auth/login", json={"email": "user@example.com", "password": "wrong-pass"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid email or password"


def test_login_unknown_email(client):
    response = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "secret123"})
    assert response.status_code == 400


def test_login_disabled_account(client, db):
    create_user(db, email="off@example.com", is_active=False)
    response = client.post("/api/auth/login", json={"email": "off@example.com", "password": "secret123"})
    assert response.status_code == 403


def test_missing_token_is_401(client):
    response = client.get("/api/auth/verify")
    assert response.status_code == 401
    assert response.json()["detail"] == "Authorization token required"


def test_invalid_token_is_403(client):
    response = client.get("/api/auth/verify", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 403
    assert response.json()["detail"] == "Invalid or expired token"


def test_expired_token_is_403(client, user):
    token = create_access_token({"sub": str(user.id)}, expires_delta=timedelta(minutes=-5))
    response = client.get("/api/auth/verify", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 403


def test_token_of_disabled_user_is_rejected(client, db):
    disabled = create_user(db, email="gone@example.com", is_active=False)
    response = client.get("/api/auth/verify", headers=auth_headers(disabled))
    assert response.status_code == 403
    assert response.json()["detail"] == "Account is disabled"


def test_token_of_deleted_user_is_401(client, db):
    removed = create_user(db, email="removed@example.com")
    headers = auth_headers(removed)
    db.delete(removed)
    db.commit()

    response = client.get("/api/auth/verify", headers=headers)
    assert response.status_code == 401

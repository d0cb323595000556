"""Signup, login, token auth and the caller's profile."""
from app.core.auth import create_access_token, get_current_user
from main import app


def signup(test_client, email="carol@example.com", password="SecurePass123"):
    return test_client.post("/api/v1/auth/signup", json={
        "name": "Carol",
        "email": email,
        "password": password,
        "currency_preference": "INR"
    })


def test_signup_returns_token(test_client):
    response = signup(test_client)

    assert response.status_code == 201
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["access_token"]
    assert body["user"]["email"] == "carol@example.com"
    assert body["user"]["currency_preference"] == "INR"
    assert "password" not in body["user"]


def test_signup_duplicate_email(test_client):
    signup(test_client)

    response = signup(test_client)

    assert response.status_code == 400


def test_login(test_client):
    signup(test_client)

    ok = test_client.post("/api/v1/auth/login", json={
        "email": "carol@example.com", "password": "SecurePass123"
    })
    wrong = test_client.post("/api/v1/auth/login", json={
        "email": "carol@example.com", "password": "WrongPass123"
    })

    assert ok.status_code == 200
    assert wrong.status_code == 401


def test_bearer_token_identifies_caller(test_client, alice):
    app.dependency_overrides.pop(get_current_user)
    token = create_access_token(alice.id)

    response = test_client.get(
        "/api/v1/users/me", headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 200
    assert response.json()["id"] == alice.id


def test_bad_token_is_unauthorized(test_client):
    app.dependency_overrides.pop(get_current_user)

    response = test_client.get(
        "/api/v1/users/me", headers={"Authorization": "Bearer not-a-token"}
    )

    assert response.status_code == 401


def test_save_profile(test_client, alice):
    response = test_client.put("/api/v1/users/me", json={
        "name": " Alice A ",
        "phone": "+1 415 555 0100",
        "country_code": "us",
        "currency_preference": "eur"
    })

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Alice A"
    assert body["country_code"] == "US"
    assert body["currency_preference"] == "EUR"


def test_save_profile_rejects_short_phone(test_client):
    response = test_client.put("/api/v1/users/me", json={
        "name": "Alice",
        "phone": "12345"
    })

    assert response.status_code == 400
    assert response.json()["detail"] == "Please enter a valid phone number (6-15 digits)"


def test_health(test_client):
    assert test_client.get("/health").json()["status"] == "healthy"

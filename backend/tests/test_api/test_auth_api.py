"""
API tests for /api/auth
"""
from unittest.mock import patch

from conftest import make_user
from dental_supply.core.exceptions import ConflictError, InvalidCredentialsError


REGISTRATION = {
    "email": "new@example.com",
    "password": "secret1",
    "firstName": "Nia",
    "lastName": "Enamel"
}


@patch('dental_supply.api.auth.AuthService')
def test_register_returns_token_and_user(MockService, client):
    MockService.return_value.register.return_value = ("tok", make_user(5, email="new@example.com"))

    response = client.post("/api/auth/register", json=REGISTRATION)

    assert response.status_code == 201
    body = response.json()
    assert body["token"] == "tok"
    assert body["user"]["email"] == "new@example.com"
    assert body["user"]["firstName"] == "Dana"
    assert "passwordHash" not in body["user"]


@patch('dental_supply.api.auth.AuthService')
def test_register_duplicate(MockService, client):
    MockService.return_value.register.side_effect = ConflictError("User already exists")

    response = client.post("/api/auth/register", json=REGISTRATION)

    assert response.status_code == 400
    assert response.json() == {"message": "User already exists"}


def test_register_short_password(client):
    response = client.post("/api/auth/register", json={**REGISTRATION, "password": "123"})

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "password"


@patch('dental_supply.api.auth.AuthService')
def test_login_bad_credentials(MockService, client):
    MockService.return_value.login.side_effect = InvalidCredentialsError("Invalid credentials")

    response = client.post("/api/auth/login", json={"email": "a@example.com", "password": "x"})

    assert response.status_code == 400
    assert response.json() == {"message": "Invalid credentials"}


def test_profile(client, user_headers):
    response = client.get("/api/auth/profile", headers=user_headers)

    assert response.status_code == 200
    assert response.json()["id"] == 1
    assert response.json()["role"] == "user"


def test_profile_requires_token(client):
    response = client.get("/api/auth/profile")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"

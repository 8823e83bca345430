"""
Tests for registration, login and session handling.
"""


def test_register_returns_user_and_token(client):
    response = client.post("/auth/register", json={"email": " Ada@Example.com ", "password": "hunter22"})
    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "ada@example.com"
    assert data["access_token"]
    assert "access_token" in response.cookies


def test_duplicate_email_is_a_conflict(client):
    client.post("/auth/register", json={"email": "ada@example.com", "password": "hunter22"})
    response = client.post("/auth/register", json={"email": "ADA@example.com", "password": "another1"})
    assert response.status_code == 409


def test_register_validates_input(client):
    assert client.post("/auth/register", json={"email": "nope", "password": "hunter22"}).status_code == 422
    assert client.post("/auth/register", json={"email": "a@b.c", "password": "123"}).status_code == 422


def test_login_and_me(client):
    client.post("/auth/register", json={"email": "ada@example.com", "password": "hunter22"})
    client.cookies.clear()

    response = client.post("/auth/login", json={"email": "ada@example.com", "password": "hunter22"})
    assert response.status_code == 200
    token = response.json()["access_token"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "ada@example.com"
    assert me.json()["last_login_at"] is not None


def test_login_wrong_password(client):
    client.post("/auth/register", json={"email": "ada@example.com", "password": "hunter22"})
    response = client.post("/auth/login", json={"email": "ada@example.com", "password": "wrong-one"})
    assert response.status_code == 401


def test_cookie_session_and_logout(client):
    client.post("/auth/register", json={"email": "ada@example.com", "password": "hunter22"})
    assert client.get("/auth/me").status_code == 200

    client.post("/auth/logout")
    client.cookies.clear()
    assert client.get("/auth/me").status_code == 401


def test_invalid_token_rejected(client):
    response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401

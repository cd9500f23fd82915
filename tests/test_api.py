"""API endpoint tests."""

import pytest
from fastapi.testclient import TestClient

from app import create_app


def test_root_lists_endpoints(client):
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["database"] == "connected"
    assert data["endpoints"]["register"] == "POST /api/auth/register"


def test_health_and_stats(client, auth_headers):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"success": True, "database": "memory", "status": "connected"}

    response = client.get("/api/stats")
    assert response.status_code == 200
    assert response.json()["collections"] == {"quotes": 5, "users": 1, "favorites": 0}


def test_unknown_route(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Route not found"}


def test_register_user(client):
    response = client.post(
        "/api/auth/register",
        json={"email": "New@Example.com", "password": "password123", "name": "New User"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    assert data["token"]
    assert data["user"]["email"] == "new@example.com"
    assert "password_hash" not in data["user"]
    assert "token_version" not in data["user"]


def test_register_duplicate_email(client, auth_headers):
    response = client.post(
        "/api/auth/register",
        json={"email": auth_headers.email, "password": "password123", "name": "Duplicate"},
    )
    assert response.status_code == 409
    assert response.json() == {"success": False, "message": "User with this email already exists"}


def test_register_invalid_payload(client):
    response = client.post(
        "/api/auth/register",
        json={"email": "not-an-email", "password": "123", "name": "Ann"},
    )
    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert {e["field"] for e in data["errors"]} == {"email", "password"}


def test_login(client, auth_headers):
    response = client.post("/api/auth/login", json={"email": "A@X.com", "password": "secret1"})
    assert response.status_code == 200
    data = response.json()
    assert data["user"]["id"] == auth_headers.user_id
    assert data["token"]


def test_login_errors_are_identical(client, auth_headers):
    wrong_password = client.post("/api/auth/login", json={"email": "a@x.com", "password": "nope-nope"})
    unknown_email = client.post("/api/auth/login", json={"email": "zed@x.com", "password": "secret1"})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json()["message"] == "Invalid email or password"
    assert "www-authenticate" not in wrong_password.headers


def test_profile_requires_token(client):
    response = client.get("/api/auth/profile")
    assert response.status_code == 401
    assert response.json()["message"] == "Access token required"
    assert response.headers["www-authenticate"] == "Bearer"


def test_profile_rejects_invalid_token(client):
    response = client.get("/api/auth/profile", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 403
    assert response.json()["message"] == "Invalid or expired token"


def test_update_profile(client, auth_headers):
    response = client.put("/api/auth/profile", headers=auth_headers, json={"name": "Annie"})
    assert response.status_code == 200
    assert "token" not in response.json()

    profile = client.get("/api/auth/profile", headers=auth_headers).json()
    assert profile["user"]["name"] == "Annie"


def test_update_profile_requires_a_field(client, auth_headers):
    response = client.put("/api/auth/profile", headers=auth_headers, json={})
    assert response.status_code == 400
    assert response.json()["message"] == "No fields to update"


def test_email_change_replaces_token(client, auth_headers):
    response = client.put("/api/auth/profile", headers=auth_headers, json={"email": "ann@y.com"})
    assert response.status_code == 200
    new_token = response.json()["token"]

    assert client.get("/api/auth/profile", headers=auth_headers).status_code == 403
    profile = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {new_token}"})
    assert profile.json()["user"]["email"] == "ann@y.com"


def test_email_change_conflict(client, auth_headers):
    client.post(
        "/api/auth/register",
        json={"email": "b@x.com", "password": "secret2", "name": "Bob"},
    )
    response = client.put("/api/auth/profile", headers=auth_headers, json={"email": "b@x.com"})
    assert response.status_code == 409


def test_delete_profile(client, auth_headers):
    client.post("/api/favorites/1", headers=auth_headers)

    response = client.delete("/api/auth/profile", headers=auth_headers)
    assert response.status_code == 200

    assert client.get("/api/auth/profile", headers=auth_headers).status_code == 403
    assert client.get("/api/stats").json()["collections"]["favorites"] == 0


def test_verify_token(client, auth_headers):
    assert client.get("/api/auth/verify").json() == {"success": True, "valid": False}

    data = client.get("/api/auth/verify", headers=auth_headers).json()
    assert data["valid"] is True
    assert data["user_id"] == auth_headers.user_id


def test_logout(client):
    response = client.post("/api/auth/logout")
    assert response.status_code == 200
    assert response.json()["success"] is True


def test_favorites_scenario(client):
    """Register, read profile, then toggle a favorite."""
    response = client.post(
        "/api/auth/register",
        json={"email": "a@x.com", "password": "secret1", "name": "Ann"},
    )
    token = response.json()["token"]
    headers = {"Authorization": f"Bearer {token}"}

    assert client.get("/api/auth/profile", headers=headers).json()["user"]["name"] == "Ann"
    assert client.get("/api/auth/profile").status_code == 401

    assert client.post("/api/favorites/1", headers=headers).status_code == 201
    repeat = client.post("/api/favorites/1", headers=headers)
    assert repeat.status_code == 409
    assert repeat.json()["message"] == "Quote is already in favorites"
    assert client.get("/api/favorites/check/1", headers=headers).json()["is_favorite"] is True

    assert client.delete("/api/favorites/1", headers=headers).status_code == 200
    assert client.get("/api/favorites/check/1", headers=headers).json()["is_favorite"] is False


def test_list_favorites(client, auth_headers):
    client.post("/api/favorites/2", headers=auth_headers)
    client.post("/api/favorites/4", headers=auth_headers)

    response = client.get("/api/favorites", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 2
    assert [f["quote_id"] for f in data["favorites"]] == [4, 2]
    assert data["favorites"][0]["quote"]["author"] == "Sam Levenson"


def test_favorites_require_token(client):
    assert client.get("/api/favorites").status_code == 401
    assert client.post("/api/favorites/1").status_code == 401


def test_favorite_errors(client, auth_headers):
    assert client.post("/api/favorites/abc", headers=auth_headers).status_code == 400
    assert client.post("/api/favorites/999", headers=auth_headers).status_code == 404
    assert client.delete("/api/favorites/3", headers=auth_headers).status_code == 404
    assert client.get("/api/favorites/check/abc", headers=auth_headers).json()["is_favorite"] is False


def test_quotes(client):
    data = client.get("/api/quotes").json()
    assert data["count"] == 5

    quote = client.get("/api/quotes/random").json()["data"]
    assert 1 <= quote["id"] <= 5

    response = client.get("/api/quotes/1")
    assert response.json()["data"]["author"] == "Steve Jobs"
    assert "is_favorite" not in response.json()

    assert client.get("/api/quotes/999").status_code == 404


@pytest.mark.parametrize("quote_id", ["²", "100000000000000000000"])
def test_out_of_range_quote_ids(client, auth_headers, quote_id):
    assert client.get(f"/api/quotes/{quote_id}").status_code == 404
    assert client.post(f"/api/favorites/{quote_id}", headers=auth_headers).status_code == 400
    assert client.delete(f"/api/favorites/{quote_id}", headers=auth_headers).status_code == 400

    check = client.get(f"/api/favorites/check/{quote_id}", headers=auth_headers)
    assert check.status_code == 200
    assert check.json()["is_favorite"] is False


def test_quotes_by_category_case_insensitive(client):
    upper = client.get("/api/quotes/category/Passion").json()
    lower = client.get("/api/quotes/category/passion").json()
    assert upper == lower
    assert upper["count"] == 1

    missing = client.get("/api/quotes/category/gardening")
    assert missing.status_code == 404
    assert missing.json()["message"] == "No quotes found for this category"


def test_quote_favorite_flag_with_optional_auth(client, auth_headers):
    client.post("/api/favorites/1", headers=auth_headers)

    assert client.get("/api/quotes/1", headers=auth_headers).json()["is_favorite"] is True
    assert client.get("/api/quotes/2", headers=auth_headers).json()["is_favorite"] is False

    anonymous = client.get("/api/quotes/1", headers={"Authorization": "Bearer garbage"})
    assert anonymous.status_code == 200
    assert "is_favorite" not in anonymous.json()


def test_unexpected_error_hides_details(test_settings, monkeypatch):
    app = create_app(test_settings)

    async def broken():
        raise RuntimeError("connection reset by peer")

    monkeypatch.setattr(app.state.services.quotes, "all", broken)

    with TestClient(app, raise_server_exceptions=False) as test_client:
        response = test_client.get("/api/quotes")

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Something went wrong!"}


def test_unexpected_error_details_in_development(test_settings, monkeypatch):
    app = create_app(test_settings.model_copy(update={"ENVIRONMENT": "development"}))

    async def broken():
        raise RuntimeError("connection reset by peer")

    monkeypatch.setattr(app.state.services.quotes, "all", broken)

    with TestClient(app, raise_server_exceptions=False) as test_client:
        response = test_client.get("/api/quotes")

    assert response.status_code == 500
    assert response.json()["error"] == "connection reset by peer"

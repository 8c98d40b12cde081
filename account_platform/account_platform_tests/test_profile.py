import jwt

from account_platform.account_platform.account_service.auth import TokenService
from account_platform.account_platform.account_service.store import UnitOfWork

from .conftest import TEST_SECRET, signup


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def test_profile_returns_profile_created_at_signup(client, store):
    token = signup(client, email="a@b.com", password="pw", name="Ana").json()["token"]

    response = client.get("/profile", headers=auth_header(token))
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    profile = body["profile"]
    assert profile["name"] == "Ana"
    assert profile["user_id"] == store.find_user_by_email("a@b.com").id
    assert profile["id"]


def test_profile_with_login_token(client):
    signup(client, email="login@example.com", password="pw", name="Lia")
    token = client.post("/auth/login", json={"email": "login@example.com", "password": "pw"}).json()["token"]

    response = client.get("/profile", headers=auth_header(token))
    assert response.status_code == 200
    assert response.json()["profile"]["name"] == "Lia"


def test_profile_requires_token(client):
    response = client.get("/profile")
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "No token"}


def test_profile_empty_bearer_is_missing_token(client):
    response = client.get("/profile", headers={"Authorization": "Bearer "})
    assert response.status_code == 401


def test_profile_non_bearer_scheme_is_missing_token(client):
    response = client.get("/profile", headers={"Authorization": "Basic dXNlcjpwdw=="})
    assert response.status_code == 401


def test_profile_malformed_token(client):
    response = client.get("/profile", headers=auth_header("not-a-token"))
    assert response.status_code == 403
    assert response.json() == {"success": False, "error": "Invalid token"}


def test_profile_token_signed_with_other_secret(client):
    forged = jwt.encode({"userId": "someone"}, "another-secret", algorithm="HS256")
    response = client.get("/profile", headers=auth_header(forged))
    assert response.status_code == 403


def test_profile_token_without_user_id(client):
    token = jwt.encode({"sub": "someone"}, TEST_SECRET, algorithm="HS256")
    response = client.get("/profile", headers=auth_header(token))
    assert response.status_code == 403


def test_profile_not_found(client):
    token = TokenService(TEST_SECRET).issue_token("no-such-user")
    response = client.get("/profile", headers=auth_header(token))
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Profile not found"}


def test_profile_store_error_returns_500(client):
    from unittest.mock import patch
    from sqlalchemy.exc import OperationalError

    token = TokenService(TEST_SECRET).issue_token("someone")
    with patch.object(UnitOfWork, "find_profile_by_user_id", side_effect=OperationalError("SELECT", {}, Exception("gone"))):
        response = client.get("/profile", headers=auth_header(token))
    assert response.status_code == 500
    assert response.json()["error"] == "DB error"

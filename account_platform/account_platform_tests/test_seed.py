from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from account_platform.account_platform.account_service.models import Profile, User
from account_platform.account_platform.account_service.routes.seed import SEED_EMAIL, SEED_NAME, SEED_PASSWORD
from account_platform.account_platform.account_service.store import UnitOfWork

from .conftest import count_rows


def test_seed_creates_demo_user(client, store):
    response = client.get("/seed")
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Seed done!"}

    user = store.find_user_by_email(SEED_EMAIL)
    assert user is not None
    profile = store.find_profile_by_user_id(user.id)
    assert profile.name == SEED_NAME


def test_seed_is_idempotent(client, store):
    assert client.get("/seed").status_code == 200
    assert client.get("/seed").status_code == 200

    assert count_rows(store, User, email=SEED_EMAIL) == 1
    assert count_rows(store, Profile) == 1


def test_seed_user_can_log_in_and_read_profile(client):
    client.get("/seed")
    login = client.post("/auth/login", json={"email": SEED_EMAIL, "password": SEED_PASSWORD})
    assert login.status_code == 200

    token = login.json()["token"]
    profile = client.get("/profile", headers={"Authorization": f"Bearer {token}"})
    assert profile.status_code == 200
    assert profile.json()["profile"]["name"] == SEED_NAME


def test_seed_store_error_returns_500(client):
    with patch.object(UnitOfWork, "insert_user", side_effect=OperationalError("INSERT", {}, Exception("readonly"))):
        response = client.get("/seed")
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Seed failed"}

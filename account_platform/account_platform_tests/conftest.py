"""
Shared fixtures: every test gets its own settings, database file and app.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from account_platform.account_platform.account_service.config import Settings
from account_platform.account_platform.account_service.main import create_app
from account_platform.account_platform.account_service.store import CredentialStore

TEST_SECRET = "test-secret"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        JWT_SECRET=TEST_SECRET,
        ENVIRONMENT="test",
        PASSWORD_HASH_ROUNDS=1000,
    )


@pytest.fixture
def store(settings):
    s = CredentialStore.from_url(settings.DATABASE_URL)
    s.init_schema()
    yield s
    s.dispose()


@pytest.fixture
def app(settings, store):
    return create_app(settings=settings, store=store)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


def count_rows(store, model, **filters) -> int:
    with Session(bind=store.engine) as session:
        return session.query(model).filter_by(**filters).count()


def signup(client, email="a@b.com", password="pw", name="Ana"):
    return client.post("/auth/signup", json={"email": email, "password": password, "name": name})

"""
Shared fixtures: an in-memory SQLite database and an authenticated client.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import uuid
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from diaryledger.core.security import create_user_token
from diaryledger.db.session import build_engine, get_db, init_db
from diaryledger.main import app
from diaryledger.models.user import User
from diaryledger.services import account_book_service, tag_service


@pytest.fixture
def engine():
    test_engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make_user(username="user"):
        user = User(provider="test", provider_subject=uuid.uuid4().hex, username=username)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make_user


@pytest.fixture
def alice(make_user):
    return make_user("alice")


@pytest.fixture
def bob(make_user):
    return make_user("bob")


@pytest.fixture
def carol(make_user):
    return make_user("carol")


@pytest.fixture
def book(db, alice):
    return account_book_service.create_account_book(db, alice.id, "Household")


@pytest.fixture
def make_tag(db):
    def _make_tag(name, category="bill", type=""):
        return tag_service.create_tag(db, name, type, category)
    return _make_tag


@pytest.fixture
def auth_headers():
    def _auth_headers(user) -> dict:
        return {"Authorization": f"Bearer {create_user_token(user.id)}"}
    return _auth_headers

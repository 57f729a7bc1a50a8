# File: tests/conftest.py

"""
Shared fixtures.

Every test gets its own in-memory SQLite database; the FastAPI app is
pointed at it through ``dependency_overrides`` so nothing touches the
configured DATABASE_URL.
"""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from taskmaster.core.security import hash_password
from taskmaster.db.init_db import init_db
from taskmaster.db.session import build_engine, get_db
from taskmaster.db.task_repository import TaskRepository
from taskmaster.db.user_repository import UserRepository
from taskmaster.main import app
from taskmaster.models.user import User, UserRole
from taskmaster.services.access_policy import Caller
from taskmaster.services.task_service import TaskService

PASSWORD = "secret1"


@pytest.fixture()
def session_factory():
    engine = build_engine("sqlite://")
    init_db(engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture()
def db(session_factory) -> Generator[Session, None, None]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory) -> Generator[TestClient, None, None]:
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db):
    """Factory that inserts a user directly, bypassing the register route."""

    def _make(email: str, role: UserRole = UserRole.USER, username: str | None = None) -> User:
        return UserRepository(db).add(
            username=username or email.split("@")[0],
            email=email,
            hashed_password=hash_password(PASSWORD),
            role=role,
        )

    return _make


@pytest.fixture()
def admin(make_user) -> User:
    return make_user("admin@x.com", role=UserRole.ADMIN)


@pytest.fixture()
def alice(make_user) -> User:
    return make_user("a@x.com")


@pytest.fixture()
def bob(make_user) -> User:
    return make_user("b@x.com")


def caller_for(user: User) -> Caller:
    return Caller(id=user.id, email=user.email, role=user.role)


@pytest.fixture()
def service(db) -> TaskService:
    return TaskService(TaskRepository(db), UserRepository(db))


def login(client: TestClient, email: str, password: str = PASSWORD) -> dict[str, str]:
    """
    Log in and return a Bearer header for the session token.

    Cookies are cleared afterwards so one TestClient can act as several
    users without the last login's cookie taking precedence.
    """
    resp = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    token = resp.cookies["access_token"]
    client.cookies.clear()
    return {"Authorization": f"Bearer {token}"}

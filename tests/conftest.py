"""
Shared fixtures: an in-memory SQLite app with a fake sensor store.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("SCHEDULER_ENABLED", "false")
os.environ.setdefault("INFLUXDB_SQL_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import Any, Dict, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from snam_baitong.application.services.auth_service import ensure_admin, hash_password
from snam_baitong.core.exceptions import UpstreamServiceException
from snam_baitong.domain.enums import Role, UserStatus
from snam_baitong.domain.models.user import User
from snam_baitong.infrastructure.database import Base, build_engine, get_db
from snam_baitong.infrastructure.repositories.user_repository import SQLAlchemyUserRepository
from snam_baitong.interfaces.deps import get_sensor_reader
from snam_baitong.main import app

SAMPLE_ROW = {
    "time": "2026-10-19T08:00:00.123456789Z",
    "temperature": 27.5,
    "moisture": 45,
    "ph": 6.4,
    "ec": 1.2,
    "nitrogen": 30,
    "salinity": 0.4,
    "location": "Kampong Cham",
    "device": "node-1",
    "secret_column": "do-not-leak",
}


class FakeSensorReader:
    """Returns a canned row; set fail=True to simulate an outage."""

    def __init__(self, row: Optional[Dict[str, Any]] = None):
        self.row = row
        self.fail = False
        self.calls = 0

    def latest_row(self) -> Optional[Dict[str, Any]]:
        self.calls += 1
        if self.fail:
            raise UpstreamServiceException("Sensor store unavailable")
        return self.row


@pytest.fixture(scope="session")
def engine():
    return build_engine("sqlite://", poolclass=StaticPool)


@pytest.fixture
def session_factory(engine):
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autocommit=False, autoflush=False)
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sensor_reader():
    return FakeSensorReader(dict(SAMPLE_ROW))


@pytest.fixture
def client(session_factory, sensor_reader):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_sensor_reader] = lambda: sensor_reader

    seed = session_factory()
    try:
        ensure_admin(SQLAlchemyUserRepository(seed, User), "admin", "admin123")
    finally:
        seed.close()

    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session_factory):
    def _make(username: str, password: str, role: Role = Role.MINISTRY, status: UserStatus = UserStatus.ACTIVE) -> int:
        session = session_factory()
        try:
            user = SQLAlchemyUserRepository(session, User).create({
                "username": username,
                "password_hash": hash_password(password),
                "role": role,
                "status": status,
            })
            return user.id
        finally:
            session.close()

    return _make


def login(client: TestClient, username: str, password: str) -> str:
    response = client.post("/api/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["token"]


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client):
    return bearer(login(client, "admin", "admin123"))


@pytest.fixture
def ministry_headers(client, make_user):
    make_user("officer", "officer-pass")
    return bearer(login(client, "officer", "officer-pass"))

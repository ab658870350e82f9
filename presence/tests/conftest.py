"""
Pytest configuration and fixtures
"""
import os

# Settings are read at import time; configure the environment before importing the app
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-pytest-only-0123456789")
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["APP_ENV"] = "local"
os.environ["OFFICE_TZ"] = "Asia/Jakarta"
os.environ["GOOGLE_SHEETS_ENABLED"] = "false"

from datetime import date, datetime, time
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.engine import Engine
from presence.main import app
from presence.db.base import Base
from presence.core.deps import get_db, get_now
from presence.core.security import hash_password

# Import all models to ensure they're registered with Base.metadata
from presence.models import User, Role, AttendanceRecord, AuditLog  # noqa


WIB = ZoneInfo("Asia/Jakarta")
OFFICE_LAT = -5.1597320842062295
OFFICE_LNG = 119.4099062887864

# Use in-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Enable foreign keys for SQLite
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def wib(hour, minute, second=0, day=date(2024, 3, 1)):
    """Aware datetime at the given Jakarta wall-clock time"""
    return datetime.combine(day, time(hour, minute, second), tzinfo=WIB)


class FrozenClock:
    """Mutable stand-in for the server clock"""

    def __init__(self, now: datetime):
        self.now = now

    def set(self, hour, minute, second=0, day=date(2024, 3, 1)):
        self.now = wib(hour, minute, second, day)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def clock():
    """Server clock pinned to 1 March 2024 07:30 WIB unless a test moves it"""
    return FrozenClock(wib(7, 30))


@pytest.fixture(scope="function")
def client(db, clock):
    """Test client fixture with database and clock overrides"""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_now] = clock
    yield TestClient(app)
    app.dependency_overrides.clear()


def _make_user(db, email, full_name, role, password, department=None, active=True):
    user = User(
        email=email,
        full_name=full_name,
        role=role.value,
        department=department,
        password_hash=hash_password(password),
        active=active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def test_employee(db):
    """Create a test employee"""
    return _make_user(db, "budi@company.com", "Budi Santoso", Role.EMPLOYEE, "testpass123", department="IT")


@pytest.fixture
def other_employee(db):
    return _make_user(db, "sari@company.com", "Sari Dewi", Role.EMPLOYEE, "testpass123", department="Finance")


@pytest.fixture
def test_admin(db):
    """Create a test admin"""
    return _make_user(db, "admin@company.com", "Admin", Role.ADMIN, "adminpass123")


@pytest.fixture
def make_user(db):
    def _factory(email, full_name="User", role=Role.EMPLOYEE, password="testpass123", department=None, active=True):
        return _make_user(db, email, full_name, role, password, department=department, active=active)
    return _factory


def get_auth_token(client, email, password):
    """Helper to get auth token"""
    response = client.post(
        "/api/v1/auth/login",
        json={"email": email, "password": password}
    )
    return response.json()["access_token"]


def auth_headers(client, email, password="testpass123"):
    return {"Authorization": f"Bearer {get_auth_token(client, email, password)}"}

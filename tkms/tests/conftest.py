"""
Pytest configuration and fixtures
"""
import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-pytest-only-0123456789")
os.environ.setdefault("APP_ENV", "local")
os.environ.setdefault("TZ", "Asia/Manila")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tkms.core.config import settings
from tkms.core.deps import get_db
from tkms.db.base import Base
from tkms.main import app
from tkms.models import UserRole  # importing tkms.models registers every table
from tkms.tests.helpers import make_user

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


@pytest.fixture(autouse=True)
def local_storage(tmp_path, monkeypatch):
    """Keep uploads on local disk under a temporary directory"""
    upload_dir = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(upload_dir))
    monkeypatch.setattr(settings, "AWS_S3_BUCKET_NAME", None)
    return upload_dir


@pytest.fixture(autouse=True)
def mail_disabled(monkeypatch):
    """No SMTP credentials unless a test configures them"""
    monkeypatch.setattr(settings, "SMTP_USER", None)
    monkeypatch.setattr(settings, "SMTP_PASS", None)


@pytest.fixture(scope="function")
def client(db):
    """Test client fixture with database override"""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def employee(db: Session):
    """Employee with a fixed employee ID"""
    return make_user(db, "juan@example.com", first_name="Juan", last_name="Dela Cruz", employee_id="ibay-0001")


@pytest.fixture
def other_employee(db: Session):
    return make_user(db, "maria@example.com", first_name="Maria", last_name="Santos", employee_id="ibay-0002")


@pytest.fixture
def admin(db: Session):
    return make_user(db, "admin@example.com", role=UserRole.ADMIN, first_name="Ada", last_name="Reyes")


@pytest.fixture
def super_admin(db: Session):
    return make_user(db, "root@example.com", role=UserRole.SUPER_ADMIN, first_name="Super", last_name="Admin")

import os
from datetime import date, datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SEED_DEFAULT_DEPARTMENTS", "false")

import config  # noqa: E402
from app import app  # noqa: E402
from core.database import get_db, init_db  # noqa: E402
from models.base import Base  # noqa: E402
from schemas.user import RoleType  # noqa: E402
from utils import photo_storage, user_manager  # noqa: E402
from utils.auth_manager import AuthManager  # noqa: E402
from utils.department_manager import DepartmentManager  # noqa: E402
from utils.user_manager import UserManager  # noqa: E402

# Create in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Override the dependency
def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def fast_settings(monkeypatch, tmp_path):
    monkeypatch.setattr(user_manager, "BCRYPT_ROUNDS", 4)
    monkeypatch.setattr(config, "CPU_SAMPLE_SECONDS", 0)
    monkeypatch.setattr(photo_storage, "PROFILE_PHOTO_DIR", tmp_path / "profiles")


@pytest.fixture
def db():
    init_db(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    return TestClient(app)


@pytest.fixture
def department(db):
    return DepartmentManager(db).create_department(
        name="Computer Science", budget=100000, start_date=date(2024, 1, 1)
    )


@pytest.fixture
def make_user(db):
    """Create a user holding a role; returns the UserModel."""
    counter = {"n": 0}

    def _make(role=RoleType.STUDENT, email=None, password="secret123"):
        counter["n"] += 1
        return UserManager(db).create_user(
            email=email or f"{role.value.lower()}{counter['n']}@school.edu",
            password=password,
            role=role,
            first_name=role.value,
            last_name=str(counter["n"]),
            enrollment_date=datetime(2024, 9, 1),
        )

    return _make


@pytest.fixture
def headers_for(db):
    """Build bearer headers for a user."""

    def _headers(user):
        token = AuthManager(db).issue_token(user).token
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def admin_headers(make_user, headers_for):
    return headers_for(make_user(RoleType.ADMIN))


@pytest.fixture
def instructor_headers(make_user, headers_for):
    return headers_for(make_user(RoleType.INSTRUCTOR))


@pytest.fixture
def student_headers(make_user, headers_for):
    return headers_for(make_user(RoleType.STUDENT))

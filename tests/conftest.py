"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- Isolated file storage
- Captured outgoing email
- Staff accounts and auth headers
"""

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from recruitflow.core.config import settings
from recruitflow.core.database import Base, get_db
from recruitflow.core.security import get_password_hash
from recruitflow.core.storage import storage
from recruitflow.models.cv_application import CvApplication, ApplicationStatus
from recruitflow.models.job_position import JobPosition, JobPositionStatus
from recruitflow.models.user import User, UserRole
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "Password123!"


@pytest.fixture
def db_session():
    """
    Create a fresh database for each test.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def isolated_storage(tmp_path, monkeypatch):
    """Point the local storage backend at a per-test directory."""
    monkeypatch.setattr(storage, "base_dir", str(tmp_path))
    return tmp_path


@pytest.fixture
def sent_emails(monkeypatch):
    """
    Configure Resend and capture every message instead of sending it.
    """
    sent = []

    def mock_send(params):
        sent.append(params)
        return {"id": f"email_{len(sent)}"}

    monkeypatch.setattr(settings, "RESEND_API_KEY", "re_test_key")
    monkeypatch.setattr("resend.Emails.send", mock_send)
    return sent


@pytest.fixture
def failing_email(monkeypatch):
    """Resend is configured but every send fails."""
    def mock_send(params):
        raise RuntimeError("Resend API unavailable")

    monkeypatch.setattr(settings, "RESEND_API_KEY", "re_test_key")
    monkeypatch.setattr("resend.Emails.send", mock_send)


def create_user(db_session, role=UserRole.STAFF_HR, email=None, name=None, department=None):
    """Helper to create a staff account with PASSWORD."""
    if role == UserRole.MANAGER and department is None:
        department = "Engineering"

    user = User(
        name=name or f"{role.value} user",
        email=email or f"{role.value}@example.com",
        hashed_password=get_password_hash(PASSWORD),
        role=role.value,
        department=department,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def auth_headers(client, email, password=PASSWORD):
    """Helper to log in and return bearer headers."""
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


def create_position(db_session, name="Backend Engineer", status=JobPositionStatus.OPEN, requested_by=None, **fields):
    """Helper to insert a job position directly, open for applications by default."""
    now = datetime.utcnow()
    values = {
        "location": "Jakarta",
        "registration_start_date": now - timedelta(days=1),
        "registration_end_date": now + timedelta(days=30),
        "available_slots": 2,
        "specific_requirements": "<p>Python, SQL</p>",
        "is_archived": False,
    }
    values.update(fields)

    position = JobPosition(
        name=name,
        status=status.value,
        requested_by_id=requested_by.id if requested_by else None,
        **values,
    )
    db_session.add(position)
    db_session.commit()
    db_session.refresh(position)
    return position


def create_application(db_session, position=None, status=ApplicationStatus.SUBMITTED, email="candidate@example.com", **fields):
    """Helper to insert an application directly, with a stored CV file."""
    object_key = fields.pop("cv_file_object_key", None)
    if object_key is None:
        from io import BytesIO
        object_key = storage.upload_file(BytesIO(b"%PDF-1.4 test cv"), "cv.pdf", folder="cvs")

    values = {
        "full_name": "Jane Candidate",
        "qualification": position.name if position else "Backend Engineer",
        "agree_terms": True,
        "cv_file_name": "cv.pdf",
        "is_archived": False,
    }
    values.update(fields)

    application = CvApplication(
        email=email,
        status=status.value,
        applied_position_id=position.id if position else None,
        cv_file_object_key=object_key,
        **values,
    )
    db_session.add(application)
    db_session.commit()
    db_session.refresh(application)
    return application


@pytest.fixture
def head_hr(db_session):
    return create_user(db_session, UserRole.HEAD_HR, email="head@example.com", name="Head HR")


@pytest.fixture
def staff_hr(db_session):
    return create_user(db_session, UserRole.STAFF_HR, email="staff@example.com", name="Staff HR")


@pytest.fixture
def manager(db_session):
    return create_user(db_session, UserRole.MANAGER, email="manager@example.com", name="Manager", department="Engineering")


@pytest.fixture
def head_headers(client, head_hr):
    return auth_headers(client, head_hr.email)


@pytest.fixture
def staff_headers(client, staff_hr):
    return auth_headers(client, staff_hr.email)


@pytest.fixture
def manager_headers(client, manager):
    return auth_headers(client, manager.email)

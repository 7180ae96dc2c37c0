import os
import tempfile
from pathlib import Path

# Point the app at a throwaway SQLite file before `campus` is imported.
_TMP_DIR = Path(tempfile.mkdtemp(prefix="campus-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'test.db'}"
os.environ["ENV"] = "dev"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from campus import models, services
from campus.database import create_db_and_tables, drop_db_and_tables, engine
from campus.main import app
from campus.routes import auth as auth_routes


@pytest.fixture(autouse=True)
def reset_db():
    """Give every test empty tables and a fresh login throttle."""
    drop_db_and_tables()
    create_db_and_tables()
    auth_routes._login_rate_limiter.clear()
    yield


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    with Session(engine) as session:
        yield session


@pytest.fixture
def make_staff(db):
    def _make(name="Staff Member", email=None, department="CSE", designation="Clerk"):
        staff = models.Staff(
            name=name,
            email=email or f"{name.lower().replace(' ', '.')}@example.edu",
            department=department,
            designation=designation,
        )
        db.add(staff)
        db.commit()
        db.refresh(staff)
        return staff
    return _make


@pytest.fixture
def make_student(db):
    def _make(name="Student One", enrollment_no="ENR001", department="CSE", with_details=True, **extra):
        details = None
        if with_details:
            details = models.StudentDetails(father_name="Parent", address="1 Campus Road")
            db.add(details)
            db.commit()
            db.refresh(details)
        student = models.Student(
            name=name,
            email=f"{enrollment_no.lower()}@example.edu",
            enrollment_no=enrollment_no,
            department=department,
            student_details_id=details.id if details else None,
            **extra,
        )
        db.add(student)
        db.commit()
        db.refresh(student)
        return student
    return _make


@pytest.fixture
def make_account(db):
    """Create a login account, optionally linked to a profile id."""
    def _make(email, role="STAFF", profile_id=None, name="Account Holder", password="secret"):
        user = models.User(
            email=email,
            name=name,
            password_hash=services.PWD_CTX.hash(password),
            role=role,
            user_id=profile_id,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def auth_headers():
    """Build an Authorization header for a caller identified by `profile_id`."""
    def _headers(profile_id, role="STAFF", email="caller@example.edu"):
        user = models.User(email=email, name="caller", password_hash="x", role=role, user_id=profile_id)
        token = services.AuthService.issue_token(user)
        return {"Authorization": f"Bearer {token}"}
    return _headers

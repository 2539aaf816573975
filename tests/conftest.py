from datetime import datetime, timedelta

import pytest

from app import create_app
from config import TestConfig
from models import db
from models.profile import Profile, ROLE_ADMIN, ROLE_TEACHER
from models.profile_change_request import ProfileChangeRequest
from models.student import Student
from utils.auth_utils import hash_password, generate_staff_token, generate_parent_token

TEACHER_PASSWORD = "Teacher@123"


@pytest.fixture
def app(tmp_path):
    class _Config(TestConfig):
        PHOTO_STORAGE_DIR = str(tmp_path / "photos")

    app = create_app(_Config)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _staff(email, role):
    profile = Profile(email=email, display_name=email.split("@")[0], role=role,
                      password_hash=hash_password(TEACHER_PASSWORD))
    db.session.add(profile)
    db.session.commit()
    return profile


@pytest.fixture
def teacher(app):
    return _staff("teacher@school.local", ROLE_TEACHER)


@pytest.fixture
def admin(app):
    return _staff("admin@school.local", ROLE_ADMIN)


@pytest.fixture
def teacher_headers(teacher):
    return {"Authorization": f"Bearer {generate_staff_token(teacher)}"}


@pytest.fixture
def admin_headers(admin):
    return {"Authorization": f"Bearer {generate_staff_token(admin)}"}


@pytest.fixture
def student(app):
    s = Student(
        name="Amani Otieno",
        class_name="4A",
        parent_email="old@x.com",
        parent_phone="0700",
        child_uid="CHILD001",
        parent_password="secret1",
        access_url="http://localhost:5173/parent-auth?uid=CHILD001",
    )
    db.session.add(s)
    db.session.commit()
    return s


@pytest.fixture
def parent_headers(student):
    return {"Authorization": f"Bearer {generate_parent_token(student)}"}


@pytest.fixture
def make_request(app):
    """Insert a profile change request directly, optionally back-dated."""
    def _make(student, status="pending", days_ago=0, **fields):
        req = ProfileChangeRequest(
            student_id=student.id,
            status=status,
            requested_at=datetime.utcnow() - timedelta(days=days_ago),
            **fields,
        )
        if status != "pending":
            req.approved_at = req.requested_at + timedelta(hours=1)
        db.session.add(req)
        db.session.commit()
        return req
    return _make


def fresh(model, pk):
    """Re-read a row after a request handled in another session scope."""
    db.session.expire_all()
    return db.session.get(model, pk)

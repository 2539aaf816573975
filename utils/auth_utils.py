import jwt
import datetime
from flask import current_app
from werkzeug.security import generate_password_hash, check_password_hash

from models.profile import Profile
from models.student import Student

ROLE_PARENT = "parent"


def hash_password(password):
    return generate_password_hash(password)

def verify_password(hash, password):
    return check_password_hash(hash, password)

def _expiry():
    hours = current_app.config.get("TOKEN_EXPIRY_HOURS", 24)
    return datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(hours=hours)

def generate_staff_token(profile: Profile) -> str:
    payload = {
        "user_id": profile.user_id,
        "email": profile.email,
        "role": profile.role,
        "exp": _expiry(),
    }
    return jwt.encode(payload, current_app.config["SECRET_KEY"], algorithm="HS256")

def generate_parent_token(student: Student) -> str:
    payload = {
        "student_id": student.id,
        "child_uid": student.child_uid,
        "role": ROLE_PARENT,
        "exp": _expiry(),
    }
    return jwt.encode(payload, current_app.config["SECRET_KEY"], algorithm="HS256")

def decode_token(token: str) -> dict:
    return jwt.decode(token, current_app.config["SECRET_KEY"], algorithms=["HS256"])

def authenticate_staff(email, password):
    profile = Profile.query.filter_by(email=str(email or "").strip().lower()).first()
    if not profile or not verify_password(profile.password_hash, str(password or "")):
        return None
    return profile

def authenticate_parent(child_uid, password):
    # Parent secrets are stored as issued, so this is a direct comparison
    student = Student.query.filter_by(child_uid=str(child_uid or "").strip()).first()
    if not student or not student.parent_password or student.parent_password != str(password):
        return None
    return student

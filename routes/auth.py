from flask import Blueprint, g, current_app
from sqlalchemy.exc import IntegrityError

from models import db
from models.profile import Profile, ROLE_ADMIN, STAFF_ROLES
from utils.auth_utils import (
    authenticate_staff, authenticate_parent, generate_staff_token, generate_parent_token, hash_password,
)
from utils.decorators import token_required, role_required
from utils.errors import AuthError, ValidationError
from utils.responses import ok, fail
from utils.validators import require_json, require_fields, clean_str, validate_email

auth_bp = Blueprint("auth", __name__)

# -------------------------
# STAFF LOGIN
# -------------------------
@auth_bp.route("/login", methods=["POST"])
def staff_login():
    data = require_json()
    require_fields(data, ["email", "password"])

    profile = authenticate_staff(data["email"], data["password"])
    if not profile:
        raise AuthError()

    return ok("Login successful", data={"token": generate_staff_token(profile), "user": profile.to_dict()})

# -------------------------
# PARENT LOGIN (child id + password issued by the teacher)
# -------------------------
@auth_bp.route("/parent/login", methods=["POST"])
def parent_login():
    data = require_json()
    require_fields(data, ["child_uid", "password"])

    student = authenticate_parent(data["child_uid"], data["password"])
    if not student:
        current_app.logger.info("Failed parent login for child_uid=%s", data["child_uid"])
        raise AuthError("Invalid Child ID or password")

    return ok("Login successful", data={
        "token": generate_parent_token(student),
        "student": student.to_dict(include_credentials=False),
    })

# -------------------------
# WHO AM I
# -------------------------
@auth_bp.route("/me", methods=["GET"])
@token_required
def me():
    if g.student is not None:
        return ok("Profile", data={"role": g.role, "student": g.student.to_dict(include_credentials=False)})
    return ok("Profile", data={"role": g.role, "user": g.user.to_dict()})

# -------------------------
# ADMIN: ADD STAFF
# -------------------------
@auth_bp.route("/staff", methods=["POST"])
@token_required
@role_required([ROLE_ADMIN])
def create_staff():
    data = require_json()
    require_fields(data, ["email", "password"])

    email = validate_email((clean_str(data["email"]) or "").lower(), field="email")
    role = (clean_str(data.get("role")) or "teacher").lower()
    if role not in STAFF_ROLES:
        raise ValidationError(f"Invalid role. Allowed: {STAFF_ROLES}")
    if not isinstance(data["password"], str):
        raise ValidationError("Password must be a string", errors={"password": "invalid type"})
    if len(data["password"]) < 8:
        raise ValidationError("Password must be at least 8 characters")

    profile = Profile(
        email=email,
        display_name=clean_str(data.get("display_name")),
        role=role,
        password_hash=hash_password(data["password"]),
    )
    db.session.add(profile)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return fail(f"{email} is already registered", 409)

    return ok("Staff account created", data=profile.to_dict(), code=201)

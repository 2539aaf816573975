from flask import Blueprint, request, current_app, send_from_directory
from sqlalchemy.exc import IntegrityError

from models import db
from models.profile import STAFF_ROLES
from models.student import Student
from utils.credentials import generate_credentials
from utils.decorators import token_required, role_required
from utils.errors import NotFoundError, ValidationError
from utils.responses import ok, fail
from utils.storage import store_student_photo
from utils.url_generator import build_access_url, build_photo_url
from utils.validators import require_json, require_fields, clean_str, validate_email

students_bp = Blueprint("students", __name__)
photos_bp = Blueprint("photos", __name__)

EDITABLE_FIELDS = ["name", "class", "parent_email", "parent_phone", "child_uid", "parent_password"]


# -----------------------------
# Helpers
# -----------------------------
def serialize(student):
    data = student.to_dict()
    data["photo_url"] = build_photo_url(student.profile_photo_url)
    return data


def get_student_or_404(student_id) -> Student:
    student = db.session.get(Student, student_id)
    if not student:
        raise NotFoundError("Student not found")
    return student


def _child_uid_taken(child_uid, exclude_id=None):
    q = Student.query.filter(Student.child_uid == child_uid)
    if exclude_id is not None:
        q = q.filter(Student.id != exclude_id)
    return q.first() is not None


def _apply_fields(student, data):
    for field in EDITABLE_FIELDS:
        if field not in data:
            continue
        value = clean_str(data.get(field))
        if field in ("name", "class") and not value:
            raise ValidationError(f"{field} is required")
        if field == "parent_email" and value:
            validate_email(value)
        setattr(student, "class_name" if field == "class" else field, value)


def _commit_or_conflict():
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return fail("Child ID already exists. Generate a new one.", 409)
    return None


# ==============================================================================
# Students
# ==============================================================================

@students_bp.route("", methods=["GET"])
@token_required
@role_required(STAFF_ROLES)
def list_students():
    q = Student.query
    class_name = clean_str(request.args.get("class"))
    if class_name:
        q = q.filter(Student.class_name == class_name)
    students = q.order_by(Student.name.asc()).all()
    return ok("Students", data=[serialize(s) for s in students], count=len(students))


@students_bp.route("/classes", methods=["GET"])
@token_required
@role_required(STAFF_ROLES)
def list_classes():
    rows = db.session.query(Student.class_name).distinct().all()
    return ok("Classes", data=sorted(r[0] for r in rows if r[0]))


@students_bp.route("/credentials", methods=["POST"])
@token_required
@role_required(STAFF_ROLES)
def new_credentials():
    creds = generate_credentials()
    while _child_uid_taken(creds["child_uid"]):
        creds = generate_credentials()
    creds["access_url"] = build_access_url(creds["child_uid"])
    return ok("Credentials generated", data=creds)


@students_bp.route("", methods=["POST"])
@token_required
@role_required(STAFF_ROLES)
def create_student():
    data = require_json()
    require_fields(data, ["name", "class"])

    student = Student()
    _apply_fields(student, data)

    if not student.child_uid or not student.parent_password:
        creds = generate_credentials()
        while _child_uid_taken(creds["child_uid"]):
            creds = generate_credentials()
        student.child_uid = student.child_uid or creds["child_uid"]
        student.parent_password = student.parent_password or creds["parent_password"]

    if _child_uid_taken(student.child_uid):
        return fail("Child ID already exists. Generate a new one.", 409)

    student.access_url = build_access_url(student.child_uid)
    db.session.add(student)
    conflict = _commit_or_conflict()
    if conflict:
        return conflict

    current_app.logger.info("Student %s added (child_uid=%s)", student.id, student.child_uid)
    return ok("Student added successfully", data=serialize(student), code=201)


@students_bp.route("/<int:student_id>", methods=["GET"])
@token_required
@role_required(STAFF_ROLES)
def get_student(student_id):
    return ok("Student", data=serialize(get_student_or_404(student_id)))


@students_bp.route("/<int:student_id>", methods=["PUT"])
@token_required
@role_required(STAFF_ROLES)
def update_student(student_id):
    student = get_student_or_404(student_id)
    data = require_json()

    new_uid = clean_str(data.get("child_uid"))
    if "child_uid" in data and not new_uid:
        raise ValidationError("child_uid cannot be empty")
    if new_uid and _child_uid_taken(new_uid, exclude_id=student.id):
        return fail("Child ID already exists. Generate a new one.", 409)

    _apply_fields(student, data)
    student.access_url = build_access_url(student.child_uid) if student.child_uid else None

    conflict = _commit_or_conflict()
    if conflict:
        return conflict
    return ok("Student updated successfully", data=serialize(student))


@students_bp.route("/<int:student_id>/photo", methods=["POST"])
@token_required
@role_required(STAFF_ROLES)
def upload_student_photo(student_id):
    student = get_student_or_404(student_id)
    store_student_photo(student, request.files.get("file"))
    db.session.commit()
    return ok("Photo uploaded", data=serialize(student))


# ==============================================================================
# Public photo URLs
# ==============================================================================

@photos_bp.route("/photos/<path:filename>", methods=["GET"])
def serve_photo(filename):
    return send_from_directory(current_app.config["PHOTO_STORAGE_DIR"], filename)

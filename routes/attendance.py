from flask import Blueprint, request, current_app
from datetime import date

from models import db
from models.attendance import Attendance, ATTENDANCE_STATUSES, STATUS_PRESENT, STATUS_ABSENT
from models.profile import STAFF_ROLES
from models.student import Student
from utils.decorators import token_required, role_required
from utils.errors import NotFoundError, ValidationError
from utils.responses import ok
from utils.validators import require_json, require_fields, parse_date, clean_str

attendance_bp = Blueprint("attendance", __name__)


# -----------------------------
# Helpers
# -----------------------------
def _normalize_status(value):
    """Accepts present/PRESENT/Present etc."""
    status = (clean_str(value) or "").capitalize()
    if status not in ATTENDANCE_STATUSES:
        raise ValidationError(f"Invalid status. Allowed: {ATTENDANCE_STATUSES}")
    return status


def daily_stats(students, records):
    total = len(students)
    present = sum(1 for r in records if r.status == STATUS_PRESENT)
    absent = sum(1 for r in records if r.status == STATUS_ABSENT)
    return {
        "total": total,
        "present": present,
        "absent": absent,
        "unmarked": total - present - absent,
    }


def history_stats(records):
    """Summary shown on the parent dashboard."""
    total_days = len(records)
    present_days = sum(1 for r in records if r.status == STATUS_PRESENT)
    percentage = (present_days / total_days) * 100 if total_days > 0 else 0
    return {
        "total_days": total_days,
        "present_days": present_days,
        "absent_days": total_days - present_days,
        "percentage": round(percentage, 1),
    }


# ==============================================================================
# Daily register
# ==============================================================================

@attendance_bp.route("", methods=["GET"])
@token_required
@role_required(STAFF_ROLES)
def daily_register():
    day = parse_date(request.args.get("date")) if request.args.get("date") else date.today()
    class_name = clean_str(request.args.get("class"))

    q = Student.query
    if class_name and class_name.lower() != "all":
        q = q.filter(Student.class_name == class_name)
    students = q.order_by(Student.name.asc()).all()

    student_ids = [s.id for s in students]
    records = Attendance.query.filter(
        Attendance.date == day,
        Attendance.student_id.in_(student_ids),
    ).all() if student_ids else []
    by_student = {r.student_id: r for r in records}

    rows = []
    for s in students:
        rec = by_student.get(s.id)
        rows.append({
            "student_id": s.id,
            "name": s.name,
            "class": s.class_name,
            "attendance": rec.to_dict() if rec else None,
        })

    return ok("Attendance", data=rows, date=day.isoformat(), stats=daily_stats(students, records))


@attendance_bp.route("", methods=["POST"])
@token_required
@role_required(STAFF_ROLES)
def mark_attendance():
    data = require_json()
    require_fields(data, ["student_id", "status"])

    status = _normalize_status(data["status"])
    day = parse_date(data["date"]) if data.get("date") else date.today()

    student = db.session.get(Student, data["student_id"])
    if not student:
        raise NotFoundError("Student not found")

    # UPSERT on (student_id, date)
    record = Attendance.query.filter_by(student_id=student.id, date=day).first()
    created = record is None
    if created:
        record = Attendance(student_id=student.id, date=day, status=status)
        db.session.add(record)
    else:
        record.status = status
    db.session.commit()

    current_app.logger.info("Attendance %s for student %s on %s", status, student.id, day.isoformat())
    return ok(f"Marked {student.name} as {status.lower()}", data=record.to_dict(), code=201 if created else 200)

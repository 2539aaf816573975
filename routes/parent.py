from flask import Blueprint, request, g, current_app

from models import db
from models.attendance import Attendance
from models.fee_payment import FeePayment
from routes.attendance import history_stats
from routes.fees import total_paid
from utils.decorators import parent_required
from utils.responses import ok
from utils.storage import store_student_photo
from utils.url_generator import build_photo_url

parent_bp = Blueprint("parent", __name__)


def _student_view(student):
    data = student.to_dict(include_credentials=False)
    data["photo_url"] = build_photo_url(student.profile_photo_url)
    return data


@parent_bp.route("/me", methods=["GET"])
@parent_required
def my_student():
    return ok("Student", data=_student_view(g.student))


@parent_bp.route("/attendance", methods=["GET"])
@parent_required
def my_attendance():
    limit = current_app.config.get("ATTENDANCE_HISTORY_LIMIT", 30)
    records = (
        Attendance.query.filter_by(student_id=g.student.id)
        .order_by(Attendance.date.desc())
        .limit(limit)
        .all()
    )
    return ok("Attendance", data=[r.to_dict() for r in records], stats=history_stats(records))


@parent_bp.route("/fees", methods=["GET"])
@parent_required
def my_fees():
    payments = (
        FeePayment.query.filter_by(student_id=g.student.id)
        .order_by(FeePayment.payment_date.desc(), FeePayment.id.desc())
        .all()
    )
    return ok("Fee payments", data=[p.to_dict() for p in payments], summary={
        "total_paid": total_paid(payments),
        "count": len(payments),
    })


@parent_bp.route("/photo", methods=["POST"])
@parent_required
def upload_photo():
    student = g.student
    store_student_photo(student, request.files.get("file"))
    db.session.commit()
    return ok("Your passport photo has been uploaded successfully.", data=_student_view(student))

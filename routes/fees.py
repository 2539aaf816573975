from flask import Blueprint
from datetime import date

from models import db
from models.fee_payment import FeePayment
from models.profile import STAFF_ROLES
from models.student import Student
from utils.decorators import token_required, role_required
from utils.errors import NotFoundError
from utils.responses import ok
from utils.validators import require_json, require_fields, parse_date, parse_amount, clean_str

fees_bp = Blueprint("fees", __name__)


def total_paid(payments):
    return sum(p.amount or 0 for p in payments)


def monthly_total(payments, today=None):
    today = today or date.today()
    return sum(
        p.amount or 0 for p in payments
        if p.payment_date and p.payment_date.year == today.year and p.payment_date.month == today.month
    )


@fees_bp.route("", methods=["GET"])
@token_required
@role_required(STAFF_ROLES)
def list_fees():
    rows = (
        db.session.query(FeePayment, Student)
        .join(Student, Student.id == FeePayment.student_id)
        .order_by(FeePayment.payment_date.desc(), FeePayment.id.desc())
        .all()
    )
    payments = [p for p, _ in rows]
    data = []
    for payment, student in rows:
        item = payment.to_dict()
        item["student"] = {"id": student.id, "name": student.name, "class": student.class_name}
        data.append(item)

    return ok("Fee payments", data=data, summary={
        "total": total_paid(payments),
        "monthly_total": monthly_total(payments),
        "count": len(payments),
    })


@fees_bp.route("", methods=["POST"])
@token_required
@role_required(STAFF_ROLES)
def record_payment():
    data = require_json()
    require_fields(data, ["student_id", "amount", "method"])

    student = db.session.get(Student, data["student_id"])
    if not student:
        raise NotFoundError("Student not found")

    payment = FeePayment(
        student_id=student.id,
        amount=parse_amount(data["amount"]),
        payment_date=parse_date(data["payment_date"], "payment_date") if data.get("payment_date") else date.today(),
        method=clean_str(data["method"]),
        notes=clean_str(data.get("notes")),
    )
    db.session.add(payment)
    db.session.commit()
    return ok("Payment recorded successfully", data=payment.to_dict(), code=201)

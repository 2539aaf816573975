from flask import Blueprint, request

from models.profile import STAFF_ROLES
from models.student import Student
from utils.decorators import token_required, role_required
from utils.notification_utils import build_email_link, build_whatsapp_link, credentials_text
from utils.responses import ok
from utils.validators import clean_str

sharing_bp = Blueprint("sharing", __name__)


def matches(student, term):
    term = term.lower()
    return term in (student.name or "").lower() or term in (student.class_name or "").lower()


@sharing_bp.route("", methods=["GET"])
@token_required
@role_required(STAFF_ROLES)
def share_links():
    term = clean_str(request.args.get("q"))
    students = Student.query.order_by(Student.name.asc()).all()
    if term:
        students = [s for s in students if matches(s, term)]

    data = []
    for s in students:
        data.append({
            "student_id": s.id,
            "name": s.name,
            "class": s.class_name,
            "parent_email": s.parent_email,
            "parent_phone": s.parent_phone,
            "child_uid": s.child_uid,
            "access_url": s.access_url,
            "credentials_text": credentials_text(s),
            "email_link": build_email_link(s),
            "whatsapp_link": build_whatsapp_link(s),
        })
    return ok("Parent access links", data=data, count=len(data))

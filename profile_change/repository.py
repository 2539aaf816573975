from datetime import datetime
from typing import Dict, List, Optional

from models import db
from models.profile_change_request import (
    ProfileChangeRequest, STATUS_PENDING, REQUEST_STATUSES, PROPOSED_FIELDS,
)
from models.student import Student
from utils.errors import InvalidStateError, NotFoundError


def get_request(request_id: int) -> ProfileChangeRequest:
    req = db.session.get(ProfileChangeRequest, request_id)
    if not req:
        raise NotFoundError("Profile change request not found")
    return req


def get_student(student_id: int) -> Student:
    student = db.session.get(Student, student_id)
    if not student:
        raise NotFoundError("Student not found")
    return student


def list_for_student(student_id: int, limit: Optional[int] = None) -> List[ProfileChangeRequest]:
    q = ProfileChangeRequest.query.filter_by(student_id=student_id).order_by(
        ProfileChangeRequest.requested_at.desc(), ProfileChangeRequest.id.desc()
    )
    if limit is not None:
        q = q.limit(limit)
    return q.all()


def list_all() -> List[Dict]:
    """Every request with the student's display fields, newest first."""
    rows = (
        db.session.query(ProfileChangeRequest, Student)
        .outerjoin(Student, Student.id == ProfileChangeRequest.student_id)
        .order_by(ProfileChangeRequest.requested_at.desc(), ProfileChangeRequest.id.desc())
        .all()
    )
    result = []
    for req, student in rows:
        item = req.to_dict()
        item["student"] = {
            "name": student.name,
            "class": student.class_name,
            "parent_email": student.parent_email,
        } if student else None
        result.append(item)
    return result


def create(student_id: int, fields: Dict[str, Optional[str]]) -> ProfileChangeRequest:
    """Insert a pending request. Flushes but does not commit."""
    get_student(student_id)

    req = ProfileChangeRequest(student_id=student_id, status=STATUS_PENDING)
    for key in PROPOSED_FIELDS:
        setattr(req, key, fields.get(key))
    db.session.add(req)
    db.session.flush()
    return req


def transition(request_id: int, new_status: str, notes: Optional[str], approver: Optional[str]) -> None:
    """
    Compare-and-set out of pending. Only one caller can win for a given request;
    everyone else gets InvalidStateError. Does not commit.
    """
    if new_status not in REQUEST_STATUSES or new_status == STATUS_PENDING:
        raise ValueError(f"Cannot transition to {new_status!r}")

    updated = (
        ProfileChangeRequest.query
        .filter_by(id=request_id, status=STATUS_PENDING)
        .update(
            {
                "status": new_status,
                "approved_at": datetime.utcnow(),
                "approved_by": approver,
                "notes": notes,
            },
            synchronize_session=False,
        )
    )
    if updated == 1:
        return

    exists = db.session.query(ProfileChangeRequest.id).filter_by(id=request_id).first()
    if not exists:
        raise NotFoundError("Profile change request not found")
    raise InvalidStateError()

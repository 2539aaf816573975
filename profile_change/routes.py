from flask import request, g

from . import profile_change_bp
from .services import (
    ParentContext, ReviewContext,
    approve_request, reject_request, request_history, review_queue, submit_request,
)
from models.profile import STAFF_ROLES
from utils.decorators import token_required, role_required, parent_required
from utils.errors import ValidationError
from utils.responses import ok
from utils.validators import require_json


def _review_context():
    return ReviewContext(approver=g.user.email)


def _notes():
    """Notes are optional, so an empty body is fine; anything but an object is not."""
    data = request.get_json(silent=True)
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ValidationError("Invalid JSON")
    return data.get("notes")


# ==============================================================================
# Teacher review queue
# ==============================================================================

@profile_change_bp.route("/profile-changes", methods=["GET"])
@token_required
@role_required(STAFF_ROLES)
def list_requests():
    queue = review_queue()
    return ok("Profile change requests", data=queue["requests"], counts=queue["counts"])


@profile_change_bp.route("/profile-changes/<int:request_id>/approve", methods=["POST"])
@token_required
@role_required(STAFF_ROLES)
def approve(request_id):
    req = approve_request(request_id, _review_context(), notes=_notes())
    return ok("Request approved successfully.", data=req.to_dict())


@profile_change_bp.route("/profile-changes/<int:request_id>/reject", methods=["POST"])
@token_required
@role_required(STAFF_ROLES)
def reject(request_id):
    req = reject_request(request_id, _review_context(), notes=_notes())
    return ok("Request rejected successfully.", data=req.to_dict())


# ==============================================================================
# Parent submissions
# ==============================================================================

@profile_change_bp.route("/parent/profile-changes", methods=["GET"])
@parent_required
def my_requests():
    history = request_history(ParentContext(student_id=g.student.id))
    pending = next((r for r in history if r.is_pending), None)
    return ok(
        "Profile change history",
        data=[r.to_dict() for r in history],
        pending_request_id=pending.id if pending else None,
    )


@profile_change_bp.route("/parent/profile-changes", methods=["POST"])
@parent_required
def submit():
    data = require_json()
    req, history = submit_request(ParentContext(student_id=g.student.id), data)
    return ok(
        "Your profile change request has been submitted for teacher approval.",
        data=req.to_dict(),
        code=201,
        history=[r.to_dict() for r in history],
    )

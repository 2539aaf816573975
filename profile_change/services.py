"""
Profile change request lifecycle.

A parent proposes new contact details (or a new password) for their child's
record; a teacher approves or rejects the proposal exactly once. Approval copies
the accepted fields onto the student in the same transaction that moves the
request out of ``pending``.
"""
import logging
import math
from dataclasses import dataclass, asdict
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import db
from models.profile_change_request import (
    ProfileChangeRequest, STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED, REQUEST_STATUSES,
)
from profile_change import repository
from utils.errors import (
    PortalError, ValidationError, PendingRequestError, RateLimitError, InvalidStateError, StoreError,
)
from utils.validators import clean_str, validate_email, validate_password

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_DAYS = 60

# request column -> Students column; parent_name has no home on the student
STUDENT_PATCH_FIELDS = {
    "parent_email": "parent_email",
    "parent_phone": "parent_phone",
    "new_password": "parent_password",
}


@dataclass(frozen=True)
class ProposedChanges:
    parent_name: Optional[str] = None
    parent_email: Optional[str] = None
    parent_phone: Optional[str] = None
    new_password: Optional[str] = None

    @classmethod
    def from_form(cls, data: Dict) -> "ProposedChanges":
        return cls(
            parent_name=clean_str(data.get("parent_name")),
            parent_email=clean_str(data.get("parent_email")),
            parent_phone=clean_str(data.get("parent_phone")),
            new_password=clean_str(data.get("new_password")),
        )

    def is_empty(self) -> bool:
        return not any(asdict(self).values())

    def as_dict(self) -> Dict[str, Optional[str]]:
        return asdict(self)


@dataclass(frozen=True)
class CooldownResult:
    allowed: bool
    retry_after_days: int = 0
    blocking_request_id: Optional[int] = None


@dataclass(frozen=True)
class ReviewContext:
    """Who is acting on the review queue; recorded as approved_by."""
    approver: str


@dataclass(frozen=True)
class ParentContext:
    student_id: int


# -----------------------------
# Cooldown policy
# -----------------------------
def evaluate_cooldown(history: Iterable, now: Optional[datetime] = None,
                      window_days: int = DEFAULT_COOLDOWN_DAYS) -> CooldownResult:
    now = now or datetime.utcnow()
    window_start = now - timedelta(days=window_days)

    blocking = [
        r for r in history
        if r.status == STATUS_APPROVED and r.requested_at and r.requested_at > window_start
    ]
    if not blocking:
        return CooldownResult(allowed=True)

    latest = max(blocking, key=lambda r: r.requested_at)
    remaining = latest.requested_at + timedelta(days=window_days) - now
    days = max(1, math.ceil(remaining.total_seconds() / 86400))
    return CooldownResult(allowed=False, retry_after_days=days, blocking_request_id=latest.id)


def check_cooldown(history: Iterable, now: Optional[datetime] = None,
                   window_days: int = DEFAULT_COOLDOWN_DAYS) -> None:
    result = evaluate_cooldown(history, now=now, window_days=window_days)
    if not result.allowed:
        raise RateLimitError(
            f"You can only update your profile once every {window_days} days. "
            f"Try again in {result.retry_after_days} day(s).",
            retry_after_days=result.retry_after_days,
        )


# -----------------------------
# Delta / patch helpers
# -----------------------------
def compute_delta(current, proposed: ProposedChanges) -> ProposedChanges:
    """
    Keep only what actually changes. Email and phone are compared with the
    student's current values; name and password have no baseline, so any
    non-empty value counts.
    """
    email = proposed.parent_email
    if email is not None and email == clean_str(getattr(current, "parent_email", None)):
        email = None

    phone = proposed.parent_phone
    if phone is not None and phone == clean_str(getattr(current, "parent_phone", None)):
        phone = None

    return ProposedChanges(
        parent_name=proposed.parent_name,
        parent_email=email,
        parent_phone=phone,
        new_password=proposed.new_password,
    )


def validate_changes(changes: ProposedChanges) -> None:
    if changes.parent_email is not None:
        validate_email(changes.parent_email)
    if changes.new_password is not None:
        validate_password(changes.new_password)


def build_student_patch(req: ProfileChangeRequest) -> Dict[str, str]:
    patch = {}
    for request_field, student_field in STUDENT_PATCH_FIELDS.items():
        value = getattr(req, request_field)
        if value:
            patch[student_field] = value
    return patch


def summarize(requests: Iterable[Dict]) -> Dict[str, int]:
    counts = {status: 0 for status in REQUEST_STATUSES}
    total = 0
    for item in requests:
        total += 1
        if item["status"] in counts:
            counts[item["status"]] += 1
    counts["total"] = total
    return counts


# -----------------------------
# Parent-facing submission
# -----------------------------
def _cooldown_days() -> int:
    return current_app.config.get("PROFILE_CHANGE_COOLDOWN_DAYS", DEFAULT_COOLDOWN_DAYS)


def _history_limit() -> int:
    return current_app.config.get("PROFILE_CHANGE_HISTORY_LIMIT", 5)


def request_history(ctx: ParentContext) -> List[ProfileChangeRequest]:
    return repository.list_for_student(ctx.student_id, limit=_history_limit())


def submit_request(ctx: ParentContext, form: Dict,
                   now: Optional[datetime] = None) -> Tuple[ProfileChangeRequest, List[ProfileChangeRequest]]:
    student = repository.get_student(ctx.student_id)
    history = repository.list_for_student(student.id)

    check_cooldown(history, now=now, window_days=_cooldown_days())

    if any(r.status == STATUS_PENDING for r in history):
        raise PendingRequestError()

    changes = compute_delta(student, ProposedChanges.from_form(form))
    if changes.is_empty():
        raise ValidationError("No changes. Please make at least one change to submit a request.")
    validate_changes(changes)

    try:
        req = repository.create(student.id, changes.as_dict())
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        logger.info("Concurrent pending request for student %s: %s", student.id, exc)
        raise PendingRequestError() from exc
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error("Failed to store profile change request for student %s: %s", student.id, exc)
        raise StoreError("Failed to submit profile change request") from exc

    logger.info("Profile change request %s submitted for student %s", req.id, student.id)
    return req, request_history(ctx)


# -----------------------------
# Teacher-facing review
# -----------------------------
def review_queue() -> Dict:
    requests = repository.list_all()
    return {"requests": requests, "counts": summarize(requests)}


def _finish(request_id: int, new_status: str, ctx: ReviewContext, notes: Optional[str]) -> ProfileChangeRequest:
    try:
        req = repository.get_request(request_id)
        if not req.is_pending:
            raise InvalidStateError()

        # Winning the compare-and-set first means a losing racer never touches the student
        repository.transition(req.id, new_status, clean_str(notes), ctx.approver)

        if new_status == STATUS_APPROVED:
            patch = build_student_patch(req)
            if patch:
                student = repository.get_student(req.student_id)
                for key, value in patch.items():
                    setattr(student, key, value)

        db.session.commit()
    except PortalError:
        db.session.rollback()
        raise
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error("Failed to %s profile change request %s: %s", new_status, request_id, exc)
        raise StoreError(f"Failed to update request {request_id}; it is still pending") from exc

    logger.info("Profile change request %s %s by %s", request_id, new_status, ctx.approver)
    return repository.get_request(request_id)


def approve_request(request_id: int, ctx: ReviewContext, notes: Optional[str] = None) -> ProfileChangeRequest:
    return _finish(request_id, STATUS_APPROVED, ctx, notes)


def reject_request(request_id: int, ctx: ReviewContext, notes: Optional[str] = None) -> ProfileChangeRequest:
    return _finish(request_id, STATUS_REJECTED, ctx, notes)

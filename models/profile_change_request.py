from datetime import datetime
from sqlalchemy import text

from models import db

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"
REQUEST_STATUSES = [STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED]

# Proposed-value columns; None means "no change requested"
PROPOSED_FIELDS = ["parent_name", "parent_email", "parent_phone", "new_password"]


class ProfileChangeRequest(db.Model):
    __tablename__ = "profile_change_requests"
    __table_args__ = (
        # At most one open request per student, even under concurrent submissions
        db.Index(
            "uq_profile_change_requests_pending_student",
            "student_id",
            unique=True,
            sqlite_where=text("status = 'pending'"),
            postgresql_where=text("status = 'pending'"),
        ),
    )

    id = db.Column(db.Integer, primary_key=True)

    # No FK constraint on this table; existence is checked by the repository
    student_id = db.Column(db.Integer, nullable=False, index=True)

    parent_name = db.Column(db.String(120), nullable=True)
    parent_email = db.Column(db.String(120), nullable=True)
    parent_phone = db.Column(db.String(30), nullable=True)
    new_password = db.Column(db.String(100), nullable=True)

    status = db.Column(db.String(20), nullable=False, default=STATUS_PENDING, index=True)
    # PENDING -> APPROVED | REJECTED (terminal)

    requested_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    approved_at = db.Column(db.DateTime, nullable=True)
    approved_by = db.Column(db.String(120), nullable=True)
    notes = db.Column(db.Text, nullable=True)

    @property
    def is_pending(self):
        return self.status == STATUS_PENDING

    def to_dict(self):
        return {
            "id": self.id,
            "student_id": self.student_id,
            "parent_name": self.parent_name,
            "parent_email": self.parent_email,
            "parent_phone": self.parent_phone,
            "new_password": self.new_password,
            "status": self.status,
            "requested_at": self.requested_at.isoformat() if self.requested_at else None,
            "approved_at": self.approved_at.isoformat() if self.approved_at else None,
            "approved_by": self.approved_by,
            "notes": self.notes,
        }

from datetime import datetime
from models import db

STATUS_PRESENT = "Present"
STATUS_ABSENT = "Absent"
ATTENDANCE_STATUSES = [STATUS_PRESENT, STATUS_ABSENT]


class Attendance(db.Model):
    """
    One row per student per date (UPSERT key)
    """
    __tablename__ = "attendance"

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey("Students.id"), nullable=False, index=True)
    date = db.Column(db.Date, nullable=False, index=True)
    status = db.Column(db.String(20), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    student = db.relationship("Student", backref=db.backref("attendance", lazy=True))

    __table_args__ = (
        db.UniqueConstraint("student_id", "date", name="uq_attendance_student_date"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "student_id": self.student_id,
            "date": self.date.isoformat() if self.date else None,
            "status": self.status,
        }

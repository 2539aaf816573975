from datetime import datetime
from models import db


class FeePayment(db.Model):
    __tablename__ = "fee_payment"

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey("Students.id"), nullable=False, index=True)
    amount = db.Column(db.Float, nullable=True)
    payment_date = db.Column(db.Date, nullable=True)
    method = db.Column(db.String(50), nullable=True)  # Cash / M-Pesa / Bank Transfer / Cheque
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    student = db.relationship("Student", backref=db.backref("fee_payments", lazy=True))

    def to_dict(self):
        return {
            "id": self.id,
            "student_id": self.student_id,
            "amount": self.amount,
            "payment_date": self.payment_date.isoformat() if self.payment_date else None,
            "method": self.method,
            "notes": self.notes,
        }

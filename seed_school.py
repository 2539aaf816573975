import os
from datetime import date, timedelta

from app import create_app
from models import db
from models.attendance import Attendance, STATUS_PRESENT, STATUS_ABSENT
from models.fee_payment import FeePayment
from models.profile import Profile, ROLE_ADMIN, ROLE_TEACHER
from models.student import Student
from models.term import Term
from utils.auth_utils import hash_password
from utils.credentials import generate_credentials
from utils.url_generator import build_access_url

DEFAULT_STAFF = [
    (os.getenv("SEED_ADMIN_EMAIL", "admin@school.local"), "Administrator", ROLE_ADMIN),
    (os.getenv("SEED_TEACHER_EMAIL", "teacher@school.local"), "Class Teacher", ROLE_TEACHER),
]
SEED_PASSWORD = os.getenv("SEED_STAFF_PASSWORD", "ChangeMe@123")

SAMPLE_STUDENTS = [
    ("Amani Otieno", "4A", "amani.parent@example.com", "+254700000001"),
    ("Brian Kamau", "4A", "brian.parent@example.com", "+254700000002"),
    ("Cynthia Wanjiru", "5B", "cynthia.parent@example.com", "+254700000003"),
]


def seed_staff():
    for email, name, role in DEFAULT_STAFF:
        if Profile.query.filter_by(email=email).first():
            continue
        db.session.add(Profile(email=email, display_name=name, role=role, password_hash=hash_password(SEED_PASSWORD)))
        print(f"   ✅ Staff {email} ({role})")


def seed_students():
    for name, class_name, email, phone in SAMPLE_STUDENTS:
        if Student.query.filter_by(name=name, class_name=class_name).first():
            continue
        creds = generate_credentials()
        student = Student(
            name=name,
            class_name=class_name,
            parent_email=email,
            parent_phone=phone,
            child_uid=creds["child_uid"],
            parent_password=creds["parent_password"],
            access_url=build_access_url(creds["child_uid"]),
        )
        db.session.add(student)
        db.session.flush()

        today = date.today()
        for offset in range(5):
            db.session.add(Attendance(
                student_id=student.id,
                date=today - timedelta(days=offset),
                status=STATUS_ABSENT if offset == 3 else STATUS_PRESENT,
            ))
        db.session.add(FeePayment(student_id=student.id, amount=15000, payment_date=today, method="M-Pesa"))
        print(f"   ✅ Student {name}: Child ID {student.child_uid} / {student.parent_password}")


def seed_term():
    if Term.query.first():
        return
    today = date.today()
    db.session.add(Term(name="Term 1", start_date=today, end_date=today + timedelta(days=90), fee_amount=50000, is_active=True))


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        seed_staff()
        seed_students()
        seed_term()
        db.session.commit()
        print("Seeding complete.")

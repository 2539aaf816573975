from datetime import datetime
from models import db


class Student(db.Model):
    __tablename__ = "Students"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    # "class" is reserved in Python, the column keeps its name
    class_name = db.Column("class", db.String(50), nullable=False, index=True)

    parent_email = db.Column(db.String(120), nullable=True)
    parent_phone = db.Column(db.String(30), nullable=True)

    # Parent login pair, stored as issued (plaintext)
    child_uid = db.Column(db.String(50), unique=True, nullable=True, index=True)
    parent_password = db.Column(db.String(100), nullable=True)
    access_url = db.Column(db.String(255), nullable=True)

    profile_photo_url = db.Column(db.String(255), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self, include_credentials=True):
        data = {
            "id": self.id,
            "name": self.name,
            "class": self.class_name,
            "parent_email": self.parent_email,
            "parent_phone": self.parent_phone,
            "child_uid": self.child_uid,
            "access_url": self.access_url,
            "profile_photo_url": self.profile_photo_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if include_credentials:
            data["parent_password"] = self.parent_password
        return data

# models/__init__.py
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

# Import all models
from .student import Student
from .profile import Profile
from .attendance import Attendance
from .fee_payment import FeePayment
from .term import Term
from .profile_change_request import ProfileChangeRequest

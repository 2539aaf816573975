import re
from datetime import datetime

from utils.errors import ValidationError

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")
MIN_PASSWORD_LENGTH = 6


def require_fields(data: dict, fields: list):
    missing = [f for f in fields if f not in data or data.get(f) in (None, "", [])]
    if missing:
        raise ValidationError("Validation failed", errors={"missing_fields": missing})


def require_json():
    from flask import request
    data = request.get_json(force=True, silent=True)
    if data is None or not isinstance(data, dict):
        raise ValidationError("Invalid JSON")
    return data


def clean_str(value):
    """Strip a form value; blank becomes None."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def validate_email(email, field="parent_email"):
    if not email or not EMAIL_PATTERN.match(email):
        raise ValidationError("Please enter a valid email", errors={field: "invalid format"})
    return email


def validate_password(password):
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
            errors={"new_password": "too short"},
        )
    return password


def parse_date(value, field="date"):
    if not value:
        raise ValidationError(f"{field} is required")
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date format for {field}, expected YYYY-MM-DD")


def parse_amount(value, field="amount", allow_zero=False):
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number")
    if amount < 0 or (amount == 0 and not allow_zero):
        raise ValidationError(f"{field} must be greater than zero" if not allow_zero else f"{field} cannot be negative")
    return amount

from flask import request, g, current_app
import jwt
from functools import wraps

from models import db
from models.profile import Profile
from models.student import Student
from utils.auth_utils import decode_token, ROLE_PARENT
from utils.responses import fail

def _bearer_token():
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    token = auth_header.split(" ", 1)[1].strip()
    if not token or token.lower() in ["null", "undefined"]:
        return None
    return token

def token_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        g.user = None
        g.student = None
        g.role = None

        token = _bearer_token()
        if not token:
            return fail("Token is missing", 401)
        try:
            payload = decode_token(token)
        except jwt.ExpiredSignatureError:
            return fail("Token expired", 401)
        except jwt.InvalidTokenError as e:
            current_app.logger.info("Rejected token: %s", e)
            return fail("Token is invalid", 401)

        role = payload.get("role")
        if role == ROLE_PARENT:
            g.student = db.session.get(Student, payload.get("student_id"))
            if not g.student:
                return fail("Student not found", 401)
        else:
            g.user = Profile.query.filter_by(user_id=payload.get("user_id")).first()
            if not g.user:
                return fail("User not found", 401)
            role = g.user.role

        g.role = role
        g.jwt_payload = payload
        return f(*args, **kwargs)
    return decorated

def role_required(allowed_roles):
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if g.get("role") not in allowed_roles:
                return fail("Permission denied", 403)
            return f(*args, **kwargs)
        return decorated_function
    return decorator

def parent_required(f):
    @wraps(f)
    @token_required
    def decorated(*args, **kwargs):
        if g.role != ROLE_PARENT or g.student is None:
            return fail("Parent access only", 403)
        return f(*args, **kwargs)
    return decorated

from flask import Blueprint

profile_change_bp = Blueprint("profile_change", __name__)

from . import routes  # noqa: E402,F401

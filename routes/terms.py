from flask import Blueprint

from models import db
from models.profile import STAFF_ROLES
from models.term import Term
from utils.decorators import token_required, role_required
from utils.errors import NotFoundError, ValidationError
from utils.responses import ok
from utils.validators import require_json, require_fields, parse_date, parse_amount, clean_str

terms_bp = Blueprint("terms", __name__)


def _get_term(term_id) -> Term:
    term = db.session.get(Term, term_id)
    if not term:
        raise NotFoundError("Term not found")
    return term


def _apply(term, data):
    if "name" in data:
        name = clean_str(data.get("name"))
        if not name:
            raise ValidationError("Term name is required")
        term.name = name
    if "start_date" in data:
        term.start_date = parse_date(data.get("start_date"), "start_date")
    if "end_date" in data:
        term.end_date = parse_date(data.get("end_date"), "end_date")
    if "fee_amount" in data:
        term.fee_amount = parse_amount(data.get("fee_amount"), "fee_amount", allow_zero=True)
    if "is_active" in data:
        term.is_active = bool(data.get("is_active"))

    if term.start_date and term.end_date and term.end_date < term.start_date:
        raise ValidationError("end_date cannot be before start_date")


@terms_bp.route("", methods=["GET"])
@token_required
@role_required(STAFF_ROLES)
def list_terms():
    terms = Term.query.order_by(Term.created_at.desc(), Term.id.desc()).all()
    active = next((t for t in terms if t.is_active), None)
    return ok("Terms", data=[t.to_dict() for t in terms], active_term=active.to_dict() if active else None)


@terms_bp.route("", methods=["POST"])
@token_required
@role_required(STAFF_ROLES)
def create_term():
    data = require_json()
    require_fields(data, ["name", "start_date", "end_date", "fee_amount"])

    term = Term(is_active=False)
    _apply(term, data)
    db.session.add(term)
    db.session.commit()
    return ok("Term created successfully", data=term.to_dict(), code=201)


@terms_bp.route("/<int:term_id>", methods=["PUT"])
@token_required
@role_required(STAFF_ROLES)
def update_term(term_id):
    term = _get_term(term_id)
    _apply(term, require_json())
    db.session.commit()
    return ok("Term updated successfully", data=term.to_dict())


@terms_bp.route("/<int:term_id>/toggle", methods=["POST"])
@token_required
@role_required(STAFF_ROLES)
def toggle_term(term_id):
    term = _get_term(term_id)
    term.is_active = not term.is_active
    db.session.commit()
    return ok(f"Term {'activated' if term.is_active else 'deactivated'}", data=term.to_dict())

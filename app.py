import logging

from flask import Flask
from flask_cors import CORS
from sqlalchemy.exc import SQLAlchemyError

from config import Config
from models import db
from utils.errors import PortalError, StoreError
from utils.responses import error_response

# Import Blueprints
from routes.auth import auth_bp
from routes.students import students_bp, photos_bp
from routes.attendance import attendance_bp
from routes.fees import fees_bp
from routes.terms import terms_bp
from routes.parent import parent_bp
from routes.sharing import sharing_bp
from profile_change import profile_change_bp


def register_error_handlers(app):
    @app.errorhandler(PortalError)
    def handle_portal_error(exc):
        return error_response(exc)

    @app.errorhandler(SQLAlchemyError)
    def handle_store_error(exc):
        db.session.rollback()
        app.logger.error("Database error: %s", exc)
        return error_response(StoreError())


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    # Initialize Extensions
    CORS(app, resources={r"/*": {"origins": "*", "allow_headers": ["Content-Type", "Authorization"], "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"]}})
    db.init_app(app)

    # Register Blueprints
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(students_bp, url_prefix="/api/students")
    app.register_blueprint(attendance_bp, url_prefix="/api/attendance")
    app.register_blueprint(fees_bp, url_prefix="/api/fees")
    app.register_blueprint(terms_bp, url_prefix="/api/terms")
    app.register_blueprint(parent_bp, url_prefix="/api/parent")
    app.register_blueprint(sharing_bp, url_prefix="/api/sharing")
    app.register_blueprint(profile_change_bp, url_prefix="/api")
    app.register_blueprint(photos_bp)

    register_error_handlers(app)

    with app.app_context():
        db.create_all()

    @app.route("/")
    def home():
        return {
          "endpoints": {
            "auth": {
              "staff_login": "POST /api/auth/login",
              "parent_login": "POST /api/auth/parent/login",
              "me": "GET /api/auth/me",
              "add_staff": "POST /api/auth/staff"
            },
            "students": {
              "list": "GET /api/students",
              "classes": "GET /api/students/classes",
              "create": "POST /api/students",
              "get": "GET /api/students/<id>",
              "update": "PUT /api/students/<id>",
              "credentials": "POST /api/students/credentials",
              "upload_photo": "POST /api/students/<id>/photo"
            },
            "attendance": {
              "daily_register": "GET /api/attendance?date=YYYY-MM-DD&class=<class>",
              "mark": "POST /api/attendance"
            },
            "fees": {
              "list": "GET /api/fees",
              "record": "POST /api/fees"
            },
            "terms": {
              "list": "GET /api/terms",
              "create": "POST /api/terms",
              "update": "PUT /api/terms/<id>",
              "toggle": "POST /api/terms/<id>/toggle"
            },
            "profile_changes": {
              "review_queue": "GET /api/profile-changes",
              "approve": "POST /api/profile-changes/<id>/approve",
              "reject": "POST /api/profile-changes/<id>/reject",
              "parent_history": "GET /api/parent/profile-changes",
              "parent_submit": "POST /api/parent/profile-changes"
            },
            "parent": {
              "student": "GET /api/parent/me",
              "attendance": "GET /api/parent/attendance",
              "fees": "GET /api/parent/fees",
              "upload_photo": "POST /api/parent/photo"
            },
            "sharing": {
              "links": "GET /api/sharing?q=<search>"
            }
          },
          "message": "School Portal API",
          "version": "1.0.0"
        }

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=True, port=5000)

import os
import tempfile
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

SECRET_KEY = os.getenv("SECRET_KEY", "school-portal-secret-key")

# Hosted Postgres in production, SQLite for local work
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{os.path.join(BASE_DIR, 'school_portal.db')}")


class Config:
    SECRET_KEY = SECRET_KEY
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    TOKEN_EXPIRY_HOURS = int(os.getenv("TOKEN_EXPIRY_HOURS", "24"))

    # Parents land here with ?uid=<child_uid> pre-filled
    PARENT_PORTAL_URL = os.getenv("PARENT_PORTAL_URL", "http://localhost:5173/parent-auth")

    PHOTO_STORAGE_DIR = os.getenv("PHOTO_STORAGE_DIR", os.path.join(BASE_DIR, "passport-photos"))
    PHOTO_PUBLIC_BASE_URL = os.getenv("PHOTO_PUBLIC_BASE_URL", "http://localhost:5000/photos")
    MAX_PHOTO_BYTES = int(os.getenv("MAX_PHOTO_BYTES", str(2 * 1024 * 1024)))

    PROFILE_CHANGE_COOLDOWN_DAYS = int(os.getenv("PROFILE_CHANGE_COOLDOWN_DAYS", "60"))
    PROFILE_CHANGE_HISTORY_LIMIT = int(os.getenv("PROFILE_CHANGE_HISTORY_LIMIT", "5"))
    ATTENDANCE_HISTORY_LIMIT = int(os.getenv("ATTENDANCE_HISTORY_LIMIT", "30"))


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret-key-with-enough-length-for-hs256"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    PHOTO_STORAGE_DIR = os.path.join(tempfile.gettempdir(), "school-portal-test-photos")
    PHOTO_PUBLIC_BASE_URL = "http://testserver/photos"

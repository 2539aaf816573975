import os
from flask import current_app
from werkzeug.utils import secure_filename

from utils.errors import ValidationError

ALLOWED_PHOTO_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp"}


def _extension(filename):
    if not filename or "." not in filename:
        return "jpg"
    return filename.rsplit(".", 1)[1].lower()


def photo_path(child_uid, filename):
    """Object key for a student's passport photo: <child_uid>/passport-photo.<ext>"""
    return f"{secure_filename(child_uid)}/passport-photo.{_extension(filename)}"


def save_photo(file, child_uid):
    """
    Upload-with-overwrite into PHOTO_STORAGE_DIR.
    Returns the stored path (relative to the storage root).
    """
    if file is None or file.filename == "":
        raise ValidationError("No selected file")
    if not (file.mimetype or "").startswith("image/"):
        raise ValidationError("Invalid file type. Please select an image file.")
    if _extension(file.filename) not in ALLOWED_PHOTO_EXTENSIONS:
        raise ValidationError(f"Invalid image type. Allowed: {sorted(ALLOWED_PHOTO_EXTENSIONS)}")

    content = file.read()
    max_bytes = current_app.config.get("MAX_PHOTO_BYTES", 2 * 1024 * 1024)
    if len(content) > max_bytes:
        raise ValidationError("File too large. Please select an image smaller than 2MB.")
    if not child_uid:
        raise ValidationError("Student has no child ID; generate credentials first")

    rel_path = photo_path(child_uid, file.filename)
    root = current_app.config["PHOTO_STORAGE_DIR"]
    target_dir = os.path.join(root, os.path.dirname(rel_path))
    os.makedirs(target_dir, exist_ok=True)

    # Clear any earlier photo with another extension
    for existing in os.listdir(target_dir):
        if existing.startswith("passport-photo."):
            os.remove(os.path.join(target_dir, existing))

    with open(os.path.join(root, rel_path), "wb") as fh:
        fh.write(content)
    return rel_path


def store_student_photo(student, file):
    """Save the upload and point the student record at it. Caller commits."""
    student.profile_photo_url = save_photo(file, student.child_uid)
    return student.profile_photo_url

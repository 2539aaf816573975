from urllib.parse import quote
from flask import current_app

def clean_base(s: str) -> str:
    if not s:
        return ""
    return s.strip().rstrip("/")

def build_access_url(child_uid: str) -> str:
    """Parent login link with the child id pre-filled."""
    base = clean_base(current_app.config.get("PARENT_PORTAL_URL", "http://localhost:5173/parent-auth"))
    return f"{base}?uid={quote(child_uid or '', safe='')}"

def build_photo_url(path: str):
    if not path:
        return None
    base = clean_base(current_app.config.get("PHOTO_PUBLIC_BASE_URL", ""))
    return f"{base}/{quote(path)}"

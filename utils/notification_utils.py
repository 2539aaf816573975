import re
from urllib.parse import quote


def credentials_text(student):
    return (
        f"Child ID: {student.child_uid}\n"
        f"Password: {student.parent_password}\n"
        f"Link: {student.access_url}"
    )


def build_email_link(student):
    """mailto: link carrying the parent's access details, or None when it can't be sent."""
    if not student.parent_email or not student.access_url:
        return None

    subject = f"Access to {student.name}'s School Records"
    body = (
        "Dear Parent,\n\n"
        f"You can now access {student.name}'s school records including attendance "
        "and fee payments using the link below.\n\n"
        f"Access Link: {student.access_url}\n\n"
        "Login Credentials:\n"
        f"Child ID: {student.child_uid}\n"
        f"Password: {student.parent_password}\n\n"
        "Please keep these credentials secure and do not share them with others.\n\n"
        "Best regards,\n"
        "School Administration"
    )
    return f"mailto:{student.parent_email}?subject={quote(subject)}&body={quote(body)}"


def build_whatsapp_link(student):
    if not student.parent_phone or not student.access_url:
        return None

    message = (
        f"Hello! You can now access {student.name}'s school records:\n\n"
        f"Link: {student.access_url}\n"
        f"Child ID: {student.child_uid}\n"
        f"Password: {student.parent_password}\n\n"
        "View attendance and fee payments anytime. Keep credentials secure."
    )
    digits = re.sub(r"\D", "", student.parent_phone)
    if not digits:
        return None
    return f"https://wa.me/{digits}?text={quote(message)}"

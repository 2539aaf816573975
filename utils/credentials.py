import secrets
import string

UID_ALPHABET = string.ascii_uppercase + string.digits
PASSWORD_ALPHABET = string.ascii_lowercase + string.digits


def generate_child_uid(length=8):
    """Random parent login id, e.g. 'K7Q2M9XA'"""
    return "".join(secrets.choice(UID_ALPHABET) for _ in range(length))


def generate_parent_password(length=8):
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))


def generate_credentials():
    return {
        "child_uid": generate_child_uid(),
        "parent_password": generate_parent_password(),
    }

import secrets
from typing import Optional

import bcrypt

from app.config import check_password_length, settings


def generate_password(length: int = 16) -> str:
    """Random password for accounts created without one."""
    return secrets.token_urlsafe(length)[:length]


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash a password with bcrypt; passwords over 72 UTF-8 bytes are rejected, not truncated."""
    check_password_length(password)
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Check a password against a bcrypt hash.
    Malformed hashes and over-long passwords are treated as a mismatch.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False

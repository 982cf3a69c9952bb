from __future__ import annotations

import re

from authcore.domain.exceptions import InvalidEmailError, WeakPasswordError


EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
PASSWORD_MAX_LENGTH = 256


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.match(email) is not None


def ensure_valid_email(email: str) -> str:
    normalized = normalize_email(email)
    if not is_valid_email(normalized):
        raise InvalidEmailError("Invalid email format.")
    return normalized


def ensure_password_strength(password: str, *, min_length: int) -> None:
    if len(password) < min_length:
        raise WeakPasswordError(f"Password must be at least {min_length} characters long.")
    if len(password) > PASSWORD_MAX_LENGTH:
        raise WeakPasswordError(f"Password must be at most {PASSWORD_MAX_LENGTH} characters long.")
    if not password.strip():
        raise WeakPasswordError("Password must not be blank.")

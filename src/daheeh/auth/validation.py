"""Email and password format checks, applied before any storage access."""

from __future__ import annotations

import re

from daheeh.errors import AuthErrorCode, CredentialValidationError

# local@domain.tld with no whitespace and a single @
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_email(email: str) -> str:
    """Lower-case and trim an email for use as a storage key."""
    return email.strip().lower()


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(normalize_email(email)))


def validate_email(email: str) -> str:
    """
    Validate the email shape and return its normalized form.

    Raises CredentialValidationError(INVALID_EMAIL) on a malformed address.
    """
    if not is_valid_email(email):
        msg = "Email must look like local@domain.tld"
        raise CredentialValidationError(AuthErrorCode.INVALID_EMAIL, msg)
    return normalize_email(email)


def validate_new_password(password: str, min_length: int = 6) -> None:
    """Raises CredentialValidationError(PASSWORD_TOO_SHORT) below ``min_length``."""
    if len(password) < min_length:
        msg = f"Password must be at least {min_length} characters"
        raise CredentialValidationError(AuthErrorCode.PASSWORD_TOO_SHORT, msg)


def validate_login_password(password: str) -> None:
    """Raises CredentialValidationError(PASSWORD_REQUIRED) for an empty password."""
    if not password:
        msg = "Password is required"
        raise CredentialValidationError(AuthErrorCode.PASSWORD_REQUIRED, msg)


def display_name_from_email(email: str) -> str:
    """Derive a display name from the email's local part."""
    return normalize_email(email).split("@", 1)[0]

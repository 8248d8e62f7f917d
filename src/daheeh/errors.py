"""Error types shared by the identity and progression services.

Expected business outcomes (bad input, duplicate account, wrong password)
are reported to callers as typed failure codes. Exceptions are reserved for
the storage layer and for internal validation plumbing that the public
operations convert into results.
"""

from __future__ import annotations

from enum import Enum


class ErrorCategory(str, Enum):
    """High-level failure categories."""

    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    AUTHENTICATION = "authentication"
    STORAGE = "storage"


class AuthErrorCode(str, Enum):
    """Failure codes returned by signup/login/login_with_google."""

    INVALID_EMAIL = "invalid_email"
    PASSWORD_TOO_SHORT = "password_too_short"
    PASSWORD_REQUIRED = "password_required"
    ACCOUNT_EXISTS = "account_exists"
    ACCOUNT_NOT_FOUND = "account_not_found"
    WRONG_PASSWORD = "wrong_password"
    INVALID_ASSERTION = "invalid_assertion"
    STORAGE_FAILURE = "storage_failure"

    @property
    def category(self) -> ErrorCategory:
        return _CATEGORIES[self]


_CATEGORIES: dict[AuthErrorCode, ErrorCategory] = {
    AuthErrorCode.INVALID_EMAIL: ErrorCategory.VALIDATION,
    AuthErrorCode.PASSWORD_TOO_SHORT: ErrorCategory.VALIDATION,
    AuthErrorCode.PASSWORD_REQUIRED: ErrorCategory.VALIDATION,
    AuthErrorCode.INVALID_ASSERTION: ErrorCategory.VALIDATION,
    AuthErrorCode.ACCOUNT_EXISTS: ErrorCategory.CONFLICT,
    AuthErrorCode.ACCOUNT_NOT_FOUND: ErrorCategory.NOT_FOUND,
    AuthErrorCode.WRONG_PASSWORD: ErrorCategory.AUTHENTICATION,
    AuthErrorCode.STORAGE_FAILURE: ErrorCategory.STORAGE,
}


class DaheehError(Exception):
    """Base exception for all core errors."""


class StorageError(DaheehError):
    """Raised when a key-value store read or write fails."""

    def __init__(self, operation: str, key: str, cause: Exception | None = None) -> None:
        self.operation = operation
        self.key = key
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Storage {operation} failed for key {key!r}{detail}")


class CredentialValidationError(DaheehError, ValueError):
    """Raised when an email or password fails format validation."""

    def __init__(self, code: AuthErrorCode, message: str) -> None:
        self.code = code
        super().__init__(message)

"""Identity models: stored credentials, users, sessions and auth results."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from daheeh.errors import AuthErrorCode


class AuthProvider(str, Enum):
    EMAIL = "email"
    GOOGLE = "google"


class AuthMode(str, Enum):
    AUTHENTICATED = "authenticated"
    GUEST = "guest"
    NONE = "none"


# ---------------------------------------------------------------------------
# Persisted credential
# ---------------------------------------------------------------------------


class StoredCredential(BaseModel):
    """One registered email account. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    display_name: str
    password_hash: str = Field(repr=False)
    created_at: datetime


# ---------------------------------------------------------------------------
# Session-visible identity
# ---------------------------------------------------------------------------


class User(BaseModel):
    """The identity exposed to callers. Never carries a password hash."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    display_name: str
    provider: AuthProvider = AuthProvider.EMAIL

    @classmethod
    def from_credential(cls, credential: StoredCredential) -> User:
        return cls(
            id=credential.id,
            email=credential.email,
            display_name=credential.display_name,
            provider=AuthProvider.EMAIL,
        )


class Session(BaseModel):
    """The single active identity. ``user`` is set iff authenticated."""

    model_config = ConfigDict(frozen=True)

    auth_mode: AuthMode = AuthMode.NONE
    user: User | None = None

    @model_validator(mode="after")
    def _user_matches_mode(self) -> Session:
        if (self.auth_mode == AuthMode.AUTHENTICATED) != (self.user is not None):
            msg = "user must be set exactly when auth_mode is authenticated"
            raise ValueError(msg)
        return self

    @property
    def is_authenticated(self) -> bool:
        return self.auth_mode == AuthMode.AUTHENTICATED

    @property
    def is_guest(self) -> bool:
        return self.auth_mode == AuthMode.GUEST


# ---------------------------------------------------------------------------
# External identity
# ---------------------------------------------------------------------------


class GoogleAssertion(BaseModel):
    """Identity already verified by Google's sign-in flow."""

    subject_id: str
    email: str
    name: str | None = None


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class AuthResult(BaseModel):
    """Outcome of signup/login/login_with_google."""

    success: bool
    user: User | None = None
    error: AuthErrorCode | None = None

    @classmethod
    def ok(cls, user: User) -> AuthResult:
        return cls(success=True, user=user)

    @classmethod
    def fail(cls, error: AuthErrorCode) -> AuthResult:
        return cls(success=False, error=error)

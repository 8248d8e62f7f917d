"""Local-first identity: credentials, hashing and sessions."""

from daheeh.auth.password import Argon2Hasher, CredentialHasher, Sha256Hasher
from daheeh.auth.schemas import AuthMode, AuthProvider, AuthResult, GoogleAssertion, Session, StoredCredential, User
from daheeh.auth.service import CredentialStore
from daheeh.auth.session import SessionManager

__all__ = [
    "Argon2Hasher",
    "AuthMode",
    "AuthProvider",
    "AuthResult",
    "CredentialHasher",
    "CredentialStore",
    "GoogleAssertion",
    "Session",
    "SessionManager",
    "Sha256Hasher",
    "StoredCredential",
    "User",
]

"""
Local credential business logic.

Handles email signup and login against on-device storage, and Google
sign-in from an already-verified identity assertion. Every public
operation returns an AuthResult; expected failures never raise.
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Callable
from datetime import datetime, timezone

import structlog
from pydantic import ValidationError

from daheeh.auth.password import CredentialHasher
from daheeh.auth.schemas import (
    AuthProvider,
    AuthResult,
    GoogleAssertion,
    StoredCredential,
    User,
)
from daheeh.auth.session import SessionManager
from daheeh.auth.validation import (
    display_name_from_email,
    normalize_email,
    validate_email,
    validate_login_password,
    validate_new_password,
)
from daheeh.errors import AuthErrorCode, CredentialValidationError, StorageError
from daheeh.storage.base import KeyValueStore

logger = structlog.get_logger()

CREDENTIAL_KEY_PREFIX = "credentials."
GOOGLE_ID_PREFIX = "google_"


def credential_key(email: str) -> str:
    """Storage key for an email account."""
    return f"{CREDENTIAL_KEY_PREFIX}{normalize_email(email)}"


def _new_user_id() -> str:
    return str(uuid.uuid4())


class CredentialStore:
    """Registers and authenticates email accounts against a KeyValueStore."""

    def __init__(
        self,
        store: KeyValueStore,
        hasher: CredentialHasher,
        sessions: SessionManager,
        *,
        password_min_length: int = 6,
        id_factory: Callable[[], str] = _new_user_id,
    ) -> None:
        self._store = store
        self._hasher = hasher
        self._sessions = sessions
        self._password_min_length = password_min_length
        self._id_factory = id_factory
        # Serializes lookup-then-write so one email maps to one account.
        self._lock = asyncio.Lock()

    # -----------------------------------------------------------------------
    # Queries
    # -----------------------------------------------------------------------

    async def get_credential(self, email: str) -> StoredCredential | None:
        """Fetch the stored credential for an email (case/whitespace-insensitive)."""
        key = credential_key(email)
        raw = await self._store.get(key)
        if raw is None:
            return None
        try:
            return StoredCredential.model_validate_json(raw)
        except ValidationError as e:
            raise StorageError("decode", key, e) from e

    # -----------------------------------------------------------------------
    # Email auth: registration
    # -----------------------------------------------------------------------

    async def signup(self, email: str, password: str, display_name: str | None = None) -> AuthResult:
        """
        Register a new email account and sign it in.

        Fails with INVALID_EMAIL, PASSWORD_TOO_SHORT, ACCOUNT_EXISTS or
        STORAGE_FAILURE. The session is only touched once the credential
        has been persisted.
        """
        try:
            normalized = validate_email(email)
            validate_new_password(password, self._password_min_length)
        except CredentialValidationError as e:
            return AuthResult.fail(e.code)

        async with self._lock:
            try:
                if await self.get_credential(normalized) is not None:
                    logger.info("signup_rejected", email=normalized, reason="account_exists")
                    return AuthResult.fail(AuthErrorCode.ACCOUNT_EXISTS)
            except StorageError:
                logger.error("credential_lookup_failed", email=normalized, exc_info=True)
                return AuthResult.fail(AuthErrorCode.STORAGE_FAILURE)

            credential = StoredCredential(
                id=self._id_factory(),
                email=normalized,
                display_name=(display_name or "").strip() or display_name_from_email(normalized),
                password_hash=self._hasher.hash(password),
                created_at=datetime.now(timezone.utc),
            )
            try:
                await self._store.set(credential_key(normalized), credential.model_dump_json())
            except StorageError:
                logger.error("credential_persist_failed", email=normalized, exc_info=True)
                return AuthResult.fail(AuthErrorCode.STORAGE_FAILURE)

        logger.info("user_created", user_id=credential.id, email=normalized, method="email")
        user = User.from_credential(credential)
        await self._sessions.establish(user)
        return AuthResult.ok(user)

    # -----------------------------------------------------------------------
    # Email auth: login
    # -----------------------------------------------------------------------

    async def login(self, email: str, password: str) -> AuthResult:
        """
        Authenticate an email account and sign it in.

        Fails with INVALID_EMAIL, PASSWORD_REQUIRED, ACCOUNT_NOT_FOUND,
        WRONG_PASSWORD or STORAGE_FAILURE.
        """
        try:
            normalized = validate_email(email)
            validate_login_password(password)
        except CredentialValidationError as e:
            return AuthResult.fail(e.code)

        try:
            credential = await self.get_credential(normalized)
        except StorageError:
            logger.error("credential_lookup_failed", email=normalized, exc_info=True)
            return AuthResult.fail(AuthErrorCode.STORAGE_FAILURE)

        if credential is None:
            logger.info("login_failed", email=normalized, reason="account_not_found")
            return AuthResult.fail(AuthErrorCode.ACCOUNT_NOT_FOUND)

        if not self._hasher.verify(password, credential.password_hash):
            logger.info("login_failed", email=normalized, reason="wrong_password")
            return AuthResult.fail(AuthErrorCode.WRONG_PASSWORD)

        if self._hasher.needs_rehash(credential.password_hash):
            await self._rehash(credential, password)

        user = User.from_credential(credential)
        await self._sessions.establish(user)
        logger.info("login_succeeded", user_id=user.id)
        return AuthResult.ok(user)

    async def _rehash(self, credential: StoredCredential, password: str) -> None:
        """Re-store the credential under current hasher parameters."""
        updated = credential.model_copy(update={"password_hash": self._hasher.hash(password)})
        async with self._lock:
            try:
                await self._store.set(credential_key(credential.email), updated.model_dump_json())
            except StorageError:
                logger.warning("password_rehash_failed", user_id=credential.id, exc_info=True)
                return
        logger.info("password_rehashed", user_id=credential.id)

    # -----------------------------------------------------------------------
    # Google sign-in
    # -----------------------------------------------------------------------

    async def login_with_google(self, assertion: GoogleAssertion) -> AuthResult:
        """
        Sign in from a verified Google identity.

        The user id is derived from the assertion subject; local password
        records are neither read nor written.
        """
        subject_id = assertion.subject_id.strip()
        if not subject_id:
            return AuthResult.fail(AuthErrorCode.INVALID_ASSERTION)
        try:
            normalized = validate_email(assertion.email)
        except CredentialValidationError as e:
            return AuthResult.fail(e.code)

        user = User(
            id=f"{GOOGLE_ID_PREFIX}{subject_id}",
            email=normalized,
            display_name=(assertion.name or "").strip() or display_name_from_email(normalized),
            provider=AuthProvider.GOOGLE,
        )
        await self._sessions.establish(user)
        logger.info("login_succeeded", user_id=user.id, method="google")
        return AuthResult.ok(user)

    # -----------------------------------------------------------------------
    # Session shortcuts
    # -----------------------------------------------------------------------

    async def continue_as_guest(self) -> None:
        await self._sessions.continue_as_guest()

    async def logout(self) -> None:
        await self._sessions.logout()

"""
Password hashing behind a small capability interface.

Argon2id is the default: it salts every hash, so two users with the same
password never share a digest. ``Sha256Hasher`` reproduces the unsalted
platform digest that older installations stored; ``Argon2Hasher`` uses it
to check those records and flags them for rehash.
"""

from __future__ import annotations

import hashlib
import hmac
from typing import Protocol

import argon2

from daheeh.config import Settings


ARGON2_PREFIX = "$argon2"


class CredentialHasher(Protocol):
    """One-way password digest used for comparison-based authentication."""

    def hash(self, password: str) -> str: ...

    def verify(self, password: str, password_hash: str) -> bool: ...

    def needs_rehash(self, password_hash: str) -> bool: ...


class Sha256Hasher:
    """Unsalted SHA-256 hex digest, compared in constant time."""

    def hash(self, password: str) -> str:
        return hashlib.sha256(password.encode("utf-8")).hexdigest()

    def verify(self, password: str, password_hash: str) -> bool:
        return hmac.compare_digest(self.hash(password).encode("utf-8"), password_hash.encode("utf-8"))

    def needs_rehash(self, password_hash: str) -> bool:
        return False


class Argon2Hasher:
    """argon2id with a random per-hash salt.

    Hashes that are not argon2 strings are checked with ``legacy`` (the
    unsalted SHA-256 digest by default) and always report ``needs_rehash``,
    so a successful login migrates them.
    """

    def __init__(
        self,
        time_cost: int = 2,
        memory_cost: int = 65536,
        parallelism: int = 1,
        *,
        legacy: CredentialHasher | None = None,
    ) -> None:
        self._hasher = argon2.PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
            hash_len=32,
            salt_len=16,
            type=argon2.Type.ID,
        )
        self._legacy = legacy if legacy is not None else Sha256Hasher()

    @classmethod
    def from_settings(cls, settings: Settings) -> Argon2Hasher:
        return cls(
            time_cost=settings.argon2_time_cost,
            memory_cost=settings.argon2_memory_cost,
            parallelism=settings.argon2_parallelism,
        )

    def hash(self, password: str) -> str:
        """Hash a password. Returns the full encoded hash string."""
        return self._hasher.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        """
        Verify a password against its argon2id or legacy hash.

        Returns True if the password matches. Never raises on mismatch.
        """
        if not password_hash.startswith(ARGON2_PREFIX):
            return self._legacy.verify(password, password_hash)
        try:
            return self._hasher.verify(password_hash, password)
        except argon2.exceptions.VerifyMismatchError:
            return False
        except argon2.exceptions.InvalidHashError:
            return False

    def needs_rehash(self, password_hash: str) -> bool:
        """True for legacy hashes and argon2 hashes made with other parameters."""
        if not password_hash.startswith(ARGON2_PREFIX):
            return True
        try:
            return self._hasher.check_needs_rehash(password_hash)
        except argon2.exceptions.InvalidHashError:
            return True

"""
Periferia Social Backend — Credential Store
============================================

What:  One-way password hashing and verification.
How:   passlib CryptContext with the bcrypt scheme. Each hash embeds its own
       random salt and cost factor, so verify() needs nothing but the hash.
Who:   AuthService (login, change password) and UserService (account creation).

Cost factor:
    BCRYPT_ROUNDS (default 10) → 2^10 key-expansion rounds, roughly 50-100ms
    per hash on commodity hardware. Tests lower it to 4 for speed.
"""

import logging
from typing import Optional

from passlib.context import CryptContext
from passlib.exc import PasswordValueError
from starlette.concurrency import run_in_threadpool

from periferia_social.config import settings
from periferia_social.exceptions import ValidationError

logger = logging.getLogger(__name__)


class CredentialStore:
    """
    Hashes and verifies passwords with bcrypt.

    hash() and verify() are CPU-bound; async callers await hash_password()
    and verify_password(), which run them in Starlette's threadpool.
    """

    def __init__(self, rounds: Optional[int] = None) -> None:
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds or settings.bcrypt_rounds,
        )

    def hash(self, plaintext: str) -> str:
        """
        Returns a salted bcrypt hash; two calls with the same input differ.

        Raises:
            ValidationError: bcrypt cannot hash the value (e.g. it contains a NUL byte)
        """
        try:
            return self._context.hash(plaintext)
        except PasswordValueError as e:
            raise ValidationError(
                "Password contains unsupported characters",
                field="password",
                context={"reason": str(e)},
            )

    def verify(self, plaintext: str, hashed: str) -> bool:
        """
        True iff `plaintext` matches `hashed`.

        A mismatch returns False. A stored value passlib cannot identify as a
        bcrypt hash also returns False rather than raising, since the caller
        treats both as "credentials do not match".
        """
        try:
            return self._context.verify(plaintext, hashed)
        except (ValueError, TypeError):
            logger.warning("Password could not be checked against the stored hash")
            return False

    async def hash_password(self, plaintext: str) -> str:
        return await run_in_threadpool(self.hash, plaintext)

    async def verify_password(self, plaintext: str, hashed: str) -> bool:
        return await run_in_threadpool(self.verify, plaintext, hashed)


credential_store = CredentialStore()

"""
Periferia Social Backend — Auth Service
========================================

What:  Login (credential check → token) and password change (re-auth → new hash).
Why:   Keeps credential rules out of the route handlers.
Who:   Called by routes/auth.py.

Enumeration resistance:
    "No such email" and "wrong password" raise the same AuthenticationError
    with the same message, so a caller cannot probe which accounts exist.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from periferia_social.exceptions import (
    AuthenticationError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from periferia_social.models.user import User
from periferia_social.services.credential_store import CredentialStore, credential_store
from periferia_social.services.token_service import TokenService, token_service

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


class AuthService:
    """
    Business logic for authentication.

    Dependencies are injectable so tests can supply a low-cost credential
    store or a token service with a fixed clock.
    """

    def __init__(
        self,
        credentials: Optional[CredentialStore] = None,
        tokens: Optional[TokenService] = None,
    ) -> None:
        self.credentials = credentials or credential_store
        self.tokens = tokens or token_service

    async def login(
        self,
        db: AsyncSession,
        email: Optional[str],
        password: Optional[str],
    ) -> str:
        """
        Verifies credentials and returns a bearer token.

        Raises:
            ValidationError: email or password missing (400)
            AuthenticationError: unknown email or wrong password (401)
        """
        if not email or not password:
            raise ValidationError("Email and password are required")

        try:
            result = await db.execute(select(User).where(User.email == email))
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error during login: %s", str(e))
            raise DatabaseError(context={"operation": "login"})

        if user is None or not await self.credentials.verify_password(password, user.password_hash):
            logger.info("Failed login attempt")
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

        logger.info("User %s logged in", user.id)
        return self.tokens.issue(user.id)

    async def change_password(
        self,
        db: AsyncSession,
        user_id: int,
        current_password: Optional[str],
        new_password: Optional[str],
    ) -> None:
        """
        Replaces the stored hash after re-checking the current password.

        The stored hash is only touched once the current password verifies.

        Raises:
            ValidationError: a field is missing, the current password is wrong,
                or the new password cannot be hashed (400)
            NotFoundError: the authenticated user no longer exists (404)
        """
        if not current_password or not new_password:
            raise ValidationError("Current and new password are required")

        try:
            user = await db.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error("Database error loading user %s: %s", user_id, str(e))
            raise DatabaseError(context={"user_id": user_id})

        if user is None:
            raise NotFoundError(resource="user", resource_id=user_id)

        if not await self.credentials.verify_password(current_password, user.password_hash):
            raise ValidationError("Current password is incorrect", field="currentPassword")

        user.password_hash = await self.credentials.hash_password(new_password)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error saving password for user %s: %s", user_id, str(e))
            raise DatabaseError(context={"user_id": user_id})

        logger.info("Password changed for user %s", user_id)


auth_service = AuthService()

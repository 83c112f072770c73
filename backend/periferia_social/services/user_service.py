"""
Periferia Social Backend — User Service
========================================

What:  Profile lookup for the authenticated user, and account creation for
       the seed tool and tests.
Who:   routes/users.py (profile), seed.py (create_user).
"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from periferia_social.exceptions import DatabaseError, NotFoundError, ValidationError
from periferia_social.models.user import User
from periferia_social.schemas.user import ProfileResponse
from periferia_social.services.credential_store import CredentialStore, credential_store

logger = logging.getLogger(__name__)


class UserService:
    """Business logic for user accounts."""

    def __init__(self, credentials: Optional[CredentialStore] = None) -> None:
        self.credentials = credentials or credential_store

    async def get_profile(self, db: AsyncSession, user_id: int) -> ProfileResponse:
        """
        Returns the user's own profile; never includes the password hash.

        Raises:
            NotFoundError: the user behind a valid token no longer exists (404)
        """
        try:
            user = await db.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching profile %s: %s", user_id, str(e))
            raise DatabaseError(context={"user_id": user_id})

        if user is None:
            raise NotFoundError(resource="user", resource_id=user_id)

        return ProfileResponse(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            alias=user.alias,
            birth_date=user.birth_date,
            email=user.email,
        )

    async def create_user(
        self,
        db: AsyncSession,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        birth_date: date,
        alias: str,
    ) -> User:
        """
        Persists a new user with a hashed password.

        Raises:
            ValidationError: email or alias already registered (400)
        """
        user = User(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=await self.credentials.hash_password(password),
            birth_date=birth_date,
            alias=alias,
        )
        db.add(user)
        try:
            await db.flush()
        except IntegrityError:
            raise ValidationError(
                "Email or alias is already registered",
                context={"email": email, "alias": alias},
            )
        except SQLAlchemyError as e:
            logger.error("Database error creating user %s: %s", alias, str(e))
            raise DatabaseError(context={"alias": alias})

        logger.info("User created: %s (id=%s)", alias, user.id)
        return user


user_service = UserService()

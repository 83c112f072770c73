"""
Periferia Social Backend — Request Dependencies
================================================

What:  Resolves the authenticated user id from the Authorization header.
How:   FastAPI's HTTPBearer extracts `Bearer <token>`; the token service
       verifies it. auto_error=False so that a missing header becomes our
       AuthenticationError envelope instead of FastAPI's default 403.
Who:   Every route except POST /api/auth/login.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from periferia_social.exceptions import AuthenticationError
from periferia_social.services.token_service import token_service

bearer_scheme = HTTPBearer(auto_error=False, description="Token from POST /api/auth/login")


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> int:
    """
    Returns the user id carried by a valid bearer token.

    Raises:
        AuthenticationError: header missing, not a bearer credential, or the
            token fails verification (401)
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Token not provided")
    return token_service.verify(credentials.credentials)

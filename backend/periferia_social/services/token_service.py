"""
Periferia Social Backend — Token Service
=========================================

What:  Issues and verifies the signed, time-limited bearer tokens.
How:   HS256 JWT via python-jose. Claims:
           sub: user id (string, as RFC 7519 requires)
           iat: issue time
           exp: issue time + ACCESS_TOKEN_EXPIRE_MINUTES (default 60)
Who:   AuthService.login issues; the get_current_user_id dependency verifies.

Signing key:
    JWT_SECRET from configuration. The development default is public, so
    main.py logs a warning for it and refuses it in production.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from periferia_social.config import settings
from periferia_social.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

INVALID_TOKEN_MESSAGE = "Invalid or expired token"


class TokenService:
    """Stateless JWT issuer/verifier bound to one secret and lifetime."""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        expire_minutes: Optional[int] = None,
    ) -> None:
        self.secret_key = secret_key or settings.jwt_secret
        self.algorithm = algorithm or settings.jwt_algorithm
        self.expire_minutes = expire_minutes or settings.access_token_expire_minutes

    def issue(self, user_id: int, now: Optional[datetime] = None) -> str:
        """Returns a signed token for `user_id` expiring `expire_minutes` from now."""
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> int:
        """
        Returns the user id carried by `token`.

        Raises:
            AuthenticationError: bad signature, malformed token, expired token,
                or a subject that is not an integer user id.
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.info("Rejected bearer token: %s", type(e).__name__)
            raise AuthenticationError(INVALID_TOKEN_MESSAGE)

        subject = payload.get("sub")
        try:
            return int(subject)
        except (TypeError, ValueError):
            raise AuthenticationError(INVALID_TOKEN_MESSAGE, context={"sub": subject})


token_service = TokenService()

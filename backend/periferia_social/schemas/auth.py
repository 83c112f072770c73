"""
Periferia Social Backend — Auth Request/Response Schemas
========================================================

Request fields are Optional on purpose: a missing field must become the
service's 400 "... are required" message, not FastAPI's generic 422.
"""

from typing import Optional

from pydantic import Field

from periferia_social.schemas.common import CamelModel


class LoginRequest(CamelModel):
    email: Optional[str] = Field(default=None, description="Account email")
    password: Optional[str] = Field(default=None, description="Plaintext password")


class TokenResponse(CamelModel):
    token: str = Field(description="Bearer token, valid for one hour")


class ChangePasswordRequest(CamelModel):
    current_password: Optional[str] = Field(default=None, description="Password in use today")
    new_password: Optional[str] = Field(default=None, description="Replacement password")

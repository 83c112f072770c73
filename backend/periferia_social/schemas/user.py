"""
Periferia Social Backend — User Profile Schema
===============================================

The profile deliberately has no password field: building it from a User row
with from_attributes copies only the fields declared here.
"""

from datetime import date

from pydantic import Field

from periferia_social.schemas.common import CamelModel


class ProfileResponse(CamelModel):
    """Returned by GET /api/users/me."""
    id: int = Field(description="User identifier")
    first_name: str = Field(description="Given name")
    last_name: str = Field(description="Family name")
    alias: str = Field(description="Public display handle")
    birth_date: date = Field(description="Date of birth (ISO 8601)")
    email: str = Field(description="Login email")

"""
Periferia Social Backend — Post Schemas
========================================

What:  Feed items and the create/update request body.
Who:   PostService builds PostView; routes use PostMessageRequest for both
       POST /api/posts and PUT /api/posts/{id}.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field, field_validator

from periferia_social.schemas.common import CamelModel


class PostMessageRequest(CamelModel):
    # Optional so that a missing message reaches the service's 400 check
    message: Optional[str] = Field(default=None, description="Post text")


class PostView(CamelModel):
    """
    One entry of the feed, also returned after creating a post.

    Wire format:
        {"id": 1, "message": "Hola", "createdAt": "...", "userId": 1,
         "userAlias": "juanp", "likesCount": 0}
    """
    id: int = Field(description="Post identifier")
    message: str = Field(description="Post text")
    created_at: datetime = Field(description="Creation timestamp (UTC)")
    user_id: int = Field(description="Owner's user id")
    user_alias: str = Field(description="Owner's public alias")
    likes_count: int = Field(default=0, description="Number of likes")

    @field_validator("created_at")
    @classmethod
    def as_utc(cls, value: datetime) -> datetime:
        # SQLite hands back naive datetimes; stored values are always UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

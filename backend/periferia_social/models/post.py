"""
Periferia Social Backend — Post SQLAlchemy Model
=================================================

What:  ORM model representing the `posts` table.
Who:   PostService for create / list / update / delete.

Table Design Rationale:
    - message TEXT NOT NULL: emptiness is rejected by the service, not the DB
    - created_at: UTC, assigned on insert, never updated
    - user_id ON DELETE CASCADE: mirrors the ORM relationship; users are never
      deleted today, but the schema does not rely on that
    - likes relationship cascade="all, delete-orphan": deleting a post through
      the ORM deletes its likes first, so no orphan Like can exist even on
      SQLite where foreign keys are not enforced by default

    Index on created_at DESC:
        The feed is always "newest first".
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, List

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from periferia_social.database import Base

if TYPE_CHECKING:
    from periferia_social.models.like import Like
    from periferia_social.models.user import User


class Post(Base):
    """
    A short text post owned by one user.

    Lifecycle:
        1. Created by its owner (message + server timestamp)
        2. Message replaced only by its owner; created_at unchanged
        3. Deleted only by its owner, together with its likes
    """

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    message: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user: Mapped["User"] = relationship(back_populates="posts")
    likes: Mapped[List["Like"]] = relationship(
        back_populates="post",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_posts_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, user_id={self.user_id}, created_at='{self.created_at}')>"

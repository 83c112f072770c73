"""
Periferia Social Backend — Like SQLAlchemy Model
=================================================

What:  ORM model representing the `likes` table.

The UNIQUE (user_id, post_id) constraint is what makes "one like per user per
post" hold under concurrent requests: PostService checks for an existing row
first, and a racing duplicate insert is rejected here with IntegrityError.
"""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from periferia_social.database import Base

if TYPE_CHECKING:
    from periferia_social.models.post import Post
    from periferia_social.models.user import User


class Like(Base):
    """A single user's like on a single post. No update or unlike path."""

    __tablename__ = "likes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user: Mapped["User"] = relationship(back_populates="likes")
    post: Mapped["Post"] = relationship(back_populates="likes")

    __table_args__ = (
        UniqueConstraint("user_id", "post_id", name="uq_likes_user_post"),
    )

    def __repr__(self) -> str:
        return f"<Like(id={self.id}, user_id={self.user_id}, post_id={self.post_id})>"

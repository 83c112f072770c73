"""
Periferia Social Backend — User SQLAlchemy Model
=================================================

What:  ORM model representing the `users` table.
Who:   Queried by AuthService (login, password change), UserService (profile)
       and PostService (owner lookup, alias for the feed).

Table Design Rationale:
    - Integer primary key: the API addresses users and posts with numeric ids
    - email UNIQUE: login identity
    - alias UNIQUE: public handle shown next to posts
    - password_hash: bcrypt string from the credential store; the plaintext is
      never stored and the hash is never serialized by any response schema
"""

from datetime import date
from typing import TYPE_CHECKING, List

from sqlalchemy import Date, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from periferia_social.database import Base

if TYPE_CHECKING:
    from periferia_social.models.like import Like
    from periferia_social.models.post import Post


class User(Base):
    """
    A registered user.

    Lifecycle:
        1. Created by the seed tool (UserService.create_user)
        2. password_hash replaced by AuthService.change_password
        3. Never deleted
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    birth_date: Mapped[date] = mapped_column(Date, nullable=False)

    alias: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)

    posts: Mapped[List["Post"]] = relationship(back_populates="user")
    likes: Mapped[List["Like"]] = relationship(back_populates="user")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, alias='{self.alias}')>"

"""
Periferia Social Backend — Post Service (Feed, Posts, Likes)
=============================================================

What:  Create / list / update / delete posts and register likes.
Why:   Encapsulates feed rules and ownership enforcement independent of HTTP.
Who:   Called by routes/posts.py.

Feed query (one round trip, no N+1):
    SELECT posts.id, posts.message, posts.created_at, posts.user_id,
           users.alias, COUNT(likes.id)
    FROM posts
    JOIN users ON users.id = posts.user_id
    LEFT OUTER JOIN likes ON likes.post_id = posts.id
    GROUP BY posts.id, users.id
    ORDER BY posts.created_at DESC, posts.id DESC

Duplicate likes:
    like_post() checks for an existing (user, post) row first. Two concurrent
    requests can both pass that check; the loser's INSERT then violates
    uq_likes_user_post and the IntegrityError is reported as the same 400.

Design Decision:
    PostService is stateless; it receives the session for each call, like
    every other service in this package.
"""

import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from periferia_social.exceptions import DatabaseError, NotFoundError, ValidationError
from periferia_social.models.like import Like
from periferia_social.models.post import Post
from periferia_social.models.user import User
from periferia_social.schemas.post import PostView
from periferia_social.services.authorization import ensure_owner

logger = logging.getLogger(__name__)

DUPLICATE_LIKE_MESSAGE = "You have already liked this post"


def _require_message(message: Optional[str]) -> str:
    if not message or not message.strip():
        raise ValidationError("Message is required", field="message")
    return message


class PostService:
    """
    Business logic layer for posts and likes.

    Error Handling Strategy:
        Domain failures raise ValidationError / NotFoundError /
        PermissionDeniedError directly. SQLAlchemy failures other than the
        expected unique-constraint violation are wrapped in DatabaseError.
    """

    async def list_posts(self, db: AsyncSession, requester_id: int) -> List[PostView]:
        """
        Returns every post, newest first, with owner alias and like count.

        `requester_id` is the authenticated caller; every user sees the same
        feed, so it is only used for logging.
        """
        likes_count = func.count(Like.id).label("likes_count")
        query = (
            select(
                Post.id,
                Post.message,
                Post.created_at,
                Post.user_id,
                User.alias,
                likes_count,
            )
            .join(User, User.id == Post.user_id)
            .outerjoin(Like, Like.post_id == Post.id)
            .group_by(Post.id, User.id)
            .order_by(Post.created_at.desc(), Post.id.desc())
        )

        try:
            result = await db.execute(query)
            rows = result.all()
        except SQLAlchemyError as e:
            logger.error("Database error listing posts: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve posts. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.debug("User %s listed %d posts", requester_id, len(rows))
        return [
            PostView(
                id=row.id,
                message=row.message,
                created_at=row.created_at,
                user_id=row.user_id,
                user_alias=row.alias,
                likes_count=row.likes_count,
            )
            for row in rows
        ]

    async def create_post(
        self,
        db: AsyncSession,
        user_id: int,
        message: Optional[str],
    ) -> PostView:
        """
        Persists a new post owned by `user_id`.

        Raises:
            ValidationError: message missing or blank (400)
            NotFoundError: the owner does not exist (404)
        """
        message = _require_message(message)

        try:
            user = await db.get(User, user_id)
            if user is None:
                raise NotFoundError(resource="user", resource_id=user_id)

            post = Post(message=message, user_id=user.id)
            db.add(post)
            # Assigns id and created_at without committing
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating post for user %s: %s", user_id, str(e))
            raise DatabaseError(context={"user_id": user_id})

        logger.info("Post %s created by user %s", post.id, user_id)
        return PostView(
            id=post.id,
            message=post.message,
            created_at=post.created_at,
            user_id=user.id,
            user_alias=user.alias,
            likes_count=0,
        )

    async def update_post(
        self,
        db: AsyncSession,
        user_id: int,
        post_id: int,
        message: Optional[str],
    ) -> None:
        """
        Replaces the message of a post the caller owns; created_at is unchanged.

        Raises:
            ValidationError: message missing or blank (400)
            NotFoundError: post does not exist (404)
            PermissionDeniedError: caller is not the owner (403)
        """
        message = _require_message(message)
        post = await self._get_post(db, post_id)
        ensure_owner(user_id, post.user_id, action="edit this post")

        post.message = message
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating post %s: %s", post_id, str(e))
            raise DatabaseError(context={"post_id": post_id})

        logger.info("Post %s updated by user %s", post_id, user_id)

    async def delete_post(self, db: AsyncSession, user_id: int, post_id: int) -> None:
        """
        Deletes a post the caller owns, together with its likes.

        Raises:
            NotFoundError: post does not exist (404)
            PermissionDeniedError: caller is not the owner (403)
        """
        post = await self._get_post(db, post_id)
        ensure_owner(user_id, post.user_id, action="delete this post")

        try:
            # ORM cascade removes the post's likes before the post row
            await db.delete(post)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting post %s: %s", post_id, str(e))
            raise DatabaseError(context={"post_id": post_id})

        logger.info("Post %s deleted by user %s", post_id, user_id)

    async def like_post(self, db: AsyncSession, user_id: int, post_id: int) -> None:
        """
        Registers one like from `user_id` on `post_id`.

        Liking twice is an error, not a toggle; there is no unlike operation.

        Raises:
            NotFoundError: post or user does not exist (404)
            ValidationError: the user already liked this post (400)
        """
        await self._get_post(db, post_id)

        try:
            user = await db.get(User, user_id)
            if user is None:
                raise NotFoundError(resource="user", resource_id=user_id)

            existing = await db.execute(
                select(Like.id).where(Like.user_id == user_id, Like.post_id == post_id)
            )
            if existing.scalar_one_or_none() is not None:
                logger.info("Duplicate like rejected: user %s, post %s", user_id, post_id)
                raise ValidationError(DUPLICATE_LIKE_MESSAGE)

            db.add(Like(user_id=user_id, post_id=post_id))
            await db.flush()
        except IntegrityError:
            # A concurrent request inserted the same pair first
            logger.info("Duplicate like rejected by constraint: user %s, post %s", user_id, post_id)
            raise ValidationError(DUPLICATE_LIKE_MESSAGE)
        except SQLAlchemyError as e:
            logger.error("Database error liking post %s: %s", post_id, str(e))
            raise DatabaseError(context={"post_id": post_id, "user_id": user_id})

        logger.info("User %s liked post %s", user_id, post_id)

    async def _get_post(self, db: AsyncSession, post_id: int) -> Post:
        try:
            post = await db.get(Post, post_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching post %s: %s", post_id, str(e))
            raise DatabaseError(context={"post_id": post_id})

        if post is None:
            raise NotFoundError(resource="post", resource_id=post_id)
        return post


# Stateless; one instance is shared by all requests
post_service = PostService()

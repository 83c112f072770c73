"""
Periferia Social Backend — Post Route Handlers
===============================================

What:  The feed and post mutations under /api/posts.
How:   Every handler resolves the caller via get_current_user_id, delegates to
       PostService, and returns the documented status code. Ownership and
       duplicate-like rules live in the service, not here.

Route Inventory:
    GET    /api/posts             → 200 [PostView]
    POST   /api/posts             → 201 PostView
    PUT    /api/posts/{id}        → 200 {message}
    DELETE /api/posts/{id}        → 204 (no body)
    POST   /api/posts/{id}/like   → 200 {message}
"""

from typing import List

from fastapi import APIRouter, Depends, Path, Response
from sqlalchemy.ext.asyncio import AsyncSession

from periferia_social.database import get_db_session
from periferia_social.dependencies import get_current_user_id
from periferia_social.schemas.common import ErrorResponse, MessageResponse
from periferia_social.schemas.post import PostMessageRequest, PostView
from periferia_social.services.post_service import post_service

router = APIRouter(prefix="/api/posts", tags=["Posts"])

# Ids outside the INTEGER column range are rejected as "Invalid request" (400)
POST_ID_MAX = 2_147_483_647

_UNAUTHORIZED = {"description": "Not authenticated", "model": ErrorResponse}
_FORBIDDEN = {"description": "Not the owner of the post", "model": ErrorResponse}
_NOT_FOUND = {"description": "Post not found", "model": ErrorResponse}


@router.get(
    "",
    response_model=List[PostView],
    responses={401: _UNAUTHORIZED},
    summary="List all posts, newest first",
)
async def list_posts(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> List[PostView]:
    return await post_service.list_posts(db, requester_id=user_id)


@router.post(
    "",
    status_code=201,
    response_model=PostView,
    responses={
        400: {"description": "Message missing or blank", "model": ErrorResponse},
        401: _UNAUTHORIZED,
        404: {"description": "Owner no longer exists", "model": ErrorResponse},
    },
    summary="Create a post",
)
async def create_post(
    body: PostMessageRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> PostView:
    return await post_service.create_post(db, user_id=user_id, message=body.message)


@router.put(
    "/{post_id}",
    response_model=MessageResponse,
    responses={
        400: {"description": "Message missing or blank", "model": ErrorResponse},
        401: _UNAUTHORIZED,
        403: _FORBIDDEN,
        404: _NOT_FOUND,
    },
    summary="Edit the message of one of your posts",
)
async def update_post(
    body: PostMessageRequest,
    post_id: int = Path(ge=1, le=POST_ID_MAX),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> MessageResponse:
    await post_service.update_post(db, user_id=user_id, post_id=post_id, message=body.message)
    return MessageResponse(message="Post updated")


@router.delete(
    "/{post_id}",
    status_code=204,
    response_class=Response,
    responses={401: _UNAUTHORIZED, 403: _FORBIDDEN, 404: _NOT_FOUND},
    summary="Delete one of your posts",
)
async def delete_post(
    post_id: int = Path(ge=1, le=POST_ID_MAX),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> Response:
    await post_service.delete_post(db, user_id=user_id, post_id=post_id)
    return Response(status_code=204)


@router.post(
    "/{post_id}/like",
    response_model=MessageResponse,
    responses={
        400: {"description": "Already liked", "model": ErrorResponse},
        401: _UNAUTHORIZED,
        404: _NOT_FOUND,
    },
    summary="Like a post (once per user)",
)
async def like_post(
    post_id: int = Path(ge=1, le=POST_ID_MAX),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> MessageResponse:
    await post_service.like_post(db, user_id=user_id, post_id=post_id)
    return MessageResponse(message="Like registered")

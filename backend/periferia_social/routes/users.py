"""
Periferia Social Backend — User Route Handlers
===============================================

What:  GET /api/users/me, the authenticated user's own profile.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from periferia_social.database import get_db_session
from periferia_social.dependencies import get_current_user_id
from periferia_social.schemas.common import ErrorResponse
from periferia_social.schemas.user import ProfileResponse
from periferia_social.services.user_service import user_service

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get(
    "/me",
    response_model=ProfileResponse,
    responses={
        401: {"description": "Not authenticated", "model": ErrorResponse},
        404: {"description": "User no longer exists", "model": ErrorResponse},
    },
    summary="Get the authenticated user's profile",
)
async def get_me(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> ProfileResponse:
    return await user_service.get_profile(db, user_id)

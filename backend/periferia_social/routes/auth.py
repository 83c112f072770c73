"""
Periferia Social Backend — Auth Route Handlers
===============================================

What:  POST /api/auth/login and POST /api/auth/change-password.
How:   Parse the JSON body, delegate to AuthService, return JSON.
       Failures propagate as PeriferiaError to the global handlers.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from periferia_social.database import get_db_session
from periferia_social.dependencies import get_current_user_id
from periferia_social.schemas.auth import ChangePasswordRequest, LoginRequest, TokenResponse
from periferia_social.schemas.common import ErrorResponse, MessageResponse
from periferia_social.services.auth_service import auth_service

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={
        400: {"description": "Email or password missing", "model": ErrorResponse},
        401: {"description": "Invalid credentials", "model": ErrorResponse},
    },
    summary="Log in and obtain a bearer token",
)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> TokenResponse:
    """
    Exchange email + password for a one-hour bearer token.

    The only route that does not require authentication.
    """
    token = await auth_service.login(db, email=body.email, password=body.password)
    return TokenResponse(token=token)


@router.post(
    "/change-password",
    response_model=MessageResponse,
    responses={
        400: {"description": "Missing fields or wrong current password", "model": ErrorResponse},
        401: {"description": "Not authenticated", "model": ErrorResponse},
        404: {"description": "User no longer exists", "model": ErrorResponse},
    },
    summary="Change the authenticated user's password",
)
async def change_password(
    body: ChangePasswordRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> MessageResponse:
    await auth_service.change_password(
        db,
        user_id=user_id,
        current_password=body.current_password,
        new_password=body.new_password,
    )
    return MessageResponse(message="Password updated successfully")

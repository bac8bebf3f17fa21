"""Auth API router — session login, logout and the current user."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.api.deps import get_current_active_user, get_db
from rentdesk.auth.dependencies import login_session, logout_session
from rentdesk.auth.passwords import verify_password
from rentdesk.models.user import User
from rentdesk.schemas.auth import LoginRequest, MessageResponse, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


# ---------------------------------------------------------------------------
# POST /login
# ---------------------------------------------------------------------------


@router.post("/login", response_model=UserResponse)
async def login(body: LoginRequest, request: Request, db: AsyncSession = Depends(get_db)) -> UserResponse:
    """Authenticate with email and password and start a cookie session."""
    result = await db.execute(select(User).where(User.email == body.email))
    user = result.scalar_one_or_none()

    if user is None or not verify_password(body.password, user.hashed_password):
        logger.info("Failed login for %s", body.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive",
        )

    login_session(request, user)
    return UserResponse.model_validate(user)


# ---------------------------------------------------------------------------
# POST /logout
# ---------------------------------------------------------------------------


@router.post("/logout", response_model=MessageResponse)
async def logout(request: Request) -> MessageResponse:
    """End the current session. Safe to call without one."""
    logout_session(request)
    return MessageResponse(message="Logged out")


# ---------------------------------------------------------------------------
# GET /me
# ---------------------------------------------------------------------------


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_active_user)) -> UserResponse:
    """Return the currently authenticated user's profile."""
    return UserResponse.model_validate(current_user)

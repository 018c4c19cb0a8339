# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Endpoints:
# - POST /api/v1/auth/register - Create an account
# - POST /api/v1/auth/login    - Exchange credentials for a token pair
# - POST /api/v1/auth/refresh  - Exchange a refresh token for an access token
# - POST /api/v1/auth/logout   - Revoke a refresh token
# =============================================================================

import logging

from fastapi import APIRouter, status

from app.dependencies import AuthServiceDep
from core.models.user import (
    AccessTokenResponse,
    RefreshRequest,
    TokenPair,
    UserLogin,
    UserRegister,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
)
async def register(body: UserRegister, auth: AuthServiceDep):
    """
    Create a new user account.

    Raises:
        400: Invalid input or weak password
        409: Email or username already taken
    """
    return await auth.register(body.email, body.username, body.password, body.full_name)


@router.post("/login", response_model=TokenPair, summary="Log in")
async def login(body: UserLogin, auth: AuthServiceDep):
    """
    Log in with email or username.

    Raises:
        401: Invalid credentials
        403: Account inactive
    """
    return await auth.login(body.identifier, body.password)


@router.post("/refresh", response_model=AccessTokenResponse, summary="Refresh the access token")
async def refresh(body: RefreshRequest, auth: AuthServiceDep):
    return await auth.refresh(body.refresh_token)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT, summary="Log out")
async def logout(body: RefreshRequest, auth: AuthServiceDep):
    """Revoke the refresh token. Safe to call more than once."""
    await auth.logout(body.refresh_token)

# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication.
#
# Access tokens are HS256 JWTs issued by AuthService. Verification needs
# only the signing secret and the clock, never a database lookup.
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

import logging
from typing import Annotated, Optional
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError

from app.auth.models import AuthUser, TokenPayload
from app.dependencies import AuthServiceDep
from app.exceptions import InvalidTokenError, UnauthenticatedError

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor; missing headers are reported by us, not FastAPI
security = HTTPBearer(auto_error=False)


async def get_current_user(
    auth: AuthServiceDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthUser:
    """
    Extract and validate the user from the Bearer access token.

    This dependency:
    1. Extracts the Bearer token from the Authorization header
    2. Verifies the signature, expiry and token type
    3. Returns an AuthUser with the user's ID and email

    Raises:
        UnauthenticatedError: 401 if no token was sent
        InvalidTokenError: 401 if the token is invalid or expired
    """
    if credentials is None:
        raise UnauthenticatedError(
            "Authentication required",
            suggestion="Send 'Authorization: Bearer <access_token>'",
        )

    payload = auth.decode_access_token(credentials.credentials)

    try:
        claims = TokenPayload(**payload)
        user_id = UUID(claims.sub)
    except (ValidationError, ValueError):
        logger.warning(f"Malformed claims in access token: sub={payload.get('sub')!r}")
        raise InvalidTokenError()

    return AuthUser(id=user_id, email=claims.email)


async def get_current_user_optional(
    auth: AuthServiceDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[AuthUser]:
    """
    Optionally get the current user from the access token.

    Returns None if no token is provided or it doesn't verify, instead of
    raising. Useful for endpoints that work with or without authentication.
    """
    if credentials is None:
        return None

    try:
        return await get_current_user(auth, credentials)
    except UnauthenticatedError:
        return None


# Type aliases for route signatures
CurrentUser = Annotated[AuthUser, Depends(get_current_user)]
OptionalUser = Annotated[Optional[AuthUser], Depends(get_current_user_optional)]

# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT bearer authentication for the API.
#
# Usage:
#   from app.auth import CurrentUser
#
#   @router.get("/protected")
#   async def protected(user: CurrentUser):
#       return {"user_id": user.id}
# =============================================================================

from app.auth.dependencies import (
    CurrentUser,
    OptionalUser,
    get_current_user,
    get_current_user_optional,
)
from app.auth.models import AuthUser

__all__ = [
    "get_current_user",
    "get_current_user_optional",
    "CurrentUser",
    "OptionalUser",
    "AuthUser",
]

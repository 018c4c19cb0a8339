# =============================================================================
# app/routers/users.py - Profile and Preferences Endpoints
# =============================================================================
# Endpoints:
# - GET /api/v1/users/profile      - Current user's profile
# - PUT /api/v1/users/profile      - Update it
# - GET /api/v1/users/preferences  - Current user's preferences
# - PUT /api/v1/users/preferences  - Update them
# =============================================================================

from fastapi import APIRouter

from app.auth import CurrentUser
from app.dependencies import UserServiceDep
from core.models.user import PreferencesResponse, PreferencesUpdate, ProfileUpdate, UserResponse

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/profile", response_model=UserResponse)
async def get_profile(user: CurrentUser, users: UserServiceDep):
    return await users.get_profile(user.id)


@router.put("/profile", response_model=UserResponse)
async def update_profile(body: ProfileUpdate, user: CurrentUser, users: UserServiceDep):
    """Only the fields sent in the body are changed."""
    return await users.update_profile(user.id, body.model_dump(exclude_unset=True))


@router.get("/preferences", response_model=PreferencesResponse)
async def get_preferences(user: CurrentUser, users: UserServiceDep):
    return await users.get_preferences(user.id)


@router.put("/preferences", response_model=PreferencesResponse)
async def update_preferences(body: PreferencesUpdate, user: CurrentUser, users: UserServiceDep):
    return await users.update_preferences(user.id, body.model_dump(exclude_unset=True, mode="json"))

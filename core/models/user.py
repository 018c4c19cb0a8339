# =============================================================================
# core/models/user.py - User, Auth and Preferences Schemas
# =============================================================================
# These models define the API contract for account operations:
# - UserRegister / UserLogin / RefreshRequest: auth inputs
# - TokenPair / AccessTokenResponse: auth outputs
# - UserResponse: profile output (never carries the password hash)
# - ProfileUpdate / PreferencesUpdate: partial updates
# =============================================================================

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field


class VerificationLevel(str, Enum):
    """
    Seller verification tier.

    - basic: email-only account
    - pro: identity checked
    - expert: identity checked with a trading track record
    """
    BASIC = "basic"
    PRO = "pro"
    EXPERT = "expert"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


# Bounds for the history lists kept in user_preferences
MAX_BROWSING_HISTORY = 50
MAX_SEARCH_HISTORY = 100


# =============================================================================
# Auth Inputs
# =============================================================================

class UserRegister(BaseModel):
    """
    Schema for creating an account.

    Password strength is checked by the auth service so a weak password
    is reported as WEAK_PASSWORD rather than a generic validation error.

    Example:
        {
            "email": "alice@example.com",
            "username": "alice",
            "password": "correct-horse-42"
        }
    """
    email: EmailStr
    username: str = Field(
        ...,
        min_length=3,
        max_length=100,
        pattern=r"^[A-Za-z0-9_.-]+$",
        description="Public handle (letters, digits, _ . -)"
    )
    password: str = Field(..., max_length=128)
    full_name: str | None = Field(default=None, max_length=255)


class UserLogin(BaseModel):
    """Login with either email or username as the identifier."""
    identifier: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("identifier", "email", "username"),
        description="Email address or username"
    )
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


# =============================================================================
# Auth Outputs
# =============================================================================

class TokenPair(BaseModel):
    """Tokens issued on login."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token lifetime in seconds")


class AccessTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


# =============================================================================
# Profile
# =============================================================================

class UserResponse(BaseModel):
    """
    User profile returned by the API.

    Built from a users row; password_hash is not a field here, so it is
    dropped by response_model filtering.
    """
    id: UUID
    email: str
    username: str
    full_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    phone: str | None = None
    address: dict[str, Any] | None = None
    is_verified: bool = False
    verification_level: VerificationLevel = VerificationLevel.BASIC
    reputation_score: Decimal = Decimal("0.00")
    total_transactions: int = 0
    years_in_community: int = 0
    is_active: bool = True
    created_at: datetime | None = None
    last_login: datetime | None = None


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile."""
    model_config = ConfigDict(extra="forbid")

    full_name: str | None = Field(default=None, max_length=255)
    bio: str | None = Field(default=None, max_length=5000)
    avatar_url: str | None = Field(default=None, max_length=500)
    phone: str | None = Field(default=None, max_length=20)
    address: dict[str, Any] | None = None


# =============================================================================
# Preferences
# =============================================================================

class PreferencesResponse(BaseModel):
    theme: Theme = Theme.SYSTEM
    language: str = "en"
    email_notifications: bool = True
    push_notifications: bool = True
    marketing_emails: bool = False
    interests: list[str] = Field(default_factory=list)
    browsing_history: list[dict[str, Any]] = Field(default_factory=list)
    search_history: list[str] = Field(default_factory=list)
    updated_at: datetime | None = None


class PreferencesUpdate(BaseModel):
    """Partial update; history lists are maintained by the server only."""
    model_config = ConfigDict(extra="forbid")

    theme: Theme | None = None
    language: str | None = Field(default=None, min_length=2, max_length=5)
    email_notifications: bool | None = None
    push_notifications: bool | None = None
    marketing_emails: bool | None = None
    interests: list[str] | None = Field(default=None, max_length=100)


def default_preferences() -> dict[str, Any]:
    """Preferences for a user who has never saved any."""
    return PreferencesResponse().model_dump(mode="json")

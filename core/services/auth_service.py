# =============================================================================
# core/services/auth_service.py - Registration, Login and Tokens
# =============================================================================
# Accounts are identified by email or username, both unique without
# regard to case. Passwords are stored as bcrypt hashes only.
#
# Token flow:
#   login    -> access token (hours) + refresh token (days, has a jti)
#   refresh  -> new access token, only while refresh:{jti} is in the cache
#   logout   -> deletes refresh:{jti}
# =============================================================================

import asyncio
import logging
import re
from datetime import timedelta
from typing import Any

from app.config import Settings
from app.exceptions import (
    AccountInactiveError,
    DuplicateEmailError,
    DuplicateUsernameError,
    InvalidCredentialsError,
    InvalidTokenError,
    WeakPasswordError,
)
from lib.redis_client import RedisStore
from lib.security import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    TokenDecodeError,
    create_token,
    decode_token,
    hash_password,
    verify_password,
)
from lib.supabase_client import SupabaseStore
from lib.utils import utcnow_iso

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
REFRESH_KEY_PREFIX = "refresh:"


def check_password_strength(password: str) -> None:
    """
    Raises:
        WeakPasswordError: Shorter than 8 characters, or missing a letter or a digit
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise WeakPasswordError(f"must be at least {MIN_PASSWORD_LENGTH} characters")
    if not re.search(r"[A-Za-z]", password):
        raise WeakPasswordError("must contain a letter")
    if not re.search(r"\d", password):
        raise WeakPasswordError("must contain a digit")


class AuthService:
    """
    Service for account creation and token lifecycle.

    bcrypt is deliberately slow, so hashing runs in a worker thread to
    keep the event loop free.
    """

    def __init__(self, store: SupabaseStore, cache: RedisStore, settings: Settings):
        self.store = store
        self.cache = cache
        self.settings = settings

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    async def register(
        self,
        email: str,
        username: str,
        password: str,
        full_name: str | None = None,
    ) -> dict[str, Any]:
        """
        Create a new account.

        Returns:
            The created user row

        Raises:
            WeakPasswordError: If the password fails the strength rules
            DuplicateEmailError: If the email is taken (any case)
            DuplicateUsernameError: If the username is taken (any case)
        """
        email = email.strip().lower()
        username = username.strip()
        check_password_strength(password)

        if await self.store.find_user_by_email(email):
            raise DuplicateEmailError(email)
        if await self.store.find_user_by_username(username):
            raise DuplicateUsernameError(username)

        password_hash = await asyncio.to_thread(hash_password, password)
        user = await self.store.create_user({
            "email": email,
            "username": username,
            "password_hash": password_hash,
            "full_name": full_name,
        })

        logger.info(f"Registered user {user['id']} ({username})")
        return user

    async def login(self, identifier: str, password: str) -> dict[str, Any]:
        """
        Authenticate with email or username and issue a token pair.

        Raises:
            InvalidCredentialsError: Unknown identifier or wrong password
            AccountInactiveError: If the account has been deactivated
        """
        identifier = identifier.strip()
        if "@" in identifier:
            user = await self.store.find_user_by_email(identifier)
        else:
            user = await self.store.find_user_by_username(identifier)

        if not user:
            raise InvalidCredentialsError()

        if not await asyncio.to_thread(verify_password, password, user.get("password_hash")):
            logger.info(f"Failed login for user {user['id']}")
            raise InvalidCredentialsError()

        if not user.get("is_active", True):
            raise AccountInactiveError()

        await self.store.update_user(user["id"], {"last_login": utcnow_iso()})
        logger.info(f"User {user['id']} logged in")
        return await self._issue_tokens(user)

    # -------------------------------------------------------------------------
    # Tokens
    # -------------------------------------------------------------------------

    def _access_token(self, user: dict[str, Any]) -> str:
        token, _ = create_token(
            str(user["id"]),
            ACCESS_TOKEN_TYPE,
            self.settings.JWT_SECRET,
            timedelta(hours=self.settings.ACCESS_TOKEN_EXPIRE_HOURS),
            algorithm=self.settings.JWT_ALGORITHM,
            extra_claims={"email": user.get("email")},
        )
        return token

    async def _issue_tokens(self, user: dict[str, Any]) -> dict[str, Any]:
        refresh_token, claims = create_token(
            str(user["id"]),
            REFRESH_TOKEN_TYPE,
            self.settings.JWT_SECRET,
            timedelta(days=self.settings.REFRESH_TOKEN_EXPIRE_DAYS),
            algorithm=self.settings.JWT_ALGORITHM,
        )
        await self.cache.set(
            f"{REFRESH_KEY_PREFIX}{claims['jti']}",
            str(user["id"]),
            ttl=self.settings.refresh_token_ttl_seconds,
        )
        return {
            "access_token": self._access_token(user),
            "refresh_token": refresh_token,
            "token_type": "bearer",
            "expires_in": self.settings.access_token_ttl_seconds,
        }

    def decode_access_token(self, token: str) -> dict[str, Any]:
        """
        Verify an access token using only the secret and the clock.

        Raises:
            InvalidTokenError: If the token is malformed, expired or not an access token
        """
        try:
            return decode_token(
                token,
                self.settings.JWT_SECRET,
                ACCESS_TOKEN_TYPE,
                algorithm=self.settings.JWT_ALGORITHM,
            )
        except TokenDecodeError as e:
            logger.debug(f"Access token rejected: {e.reason}")
            raise InvalidTokenError()

    async def refresh(self, refresh_token: str) -> dict[str, Any]:
        """
        Exchange a live refresh token for a new access token.

        Raises:
            InvalidTokenError: Bad signature, expired, wrong type, revoked,
                or the account is gone or inactive
        """
        try:
            payload = decode_token(
                refresh_token,
                self.settings.JWT_SECRET,
                REFRESH_TOKEN_TYPE,
                algorithm=self.settings.JWT_ALGORITHM,
            )
        except TokenDecodeError as e:
            logger.debug(f"Refresh token rejected: {e.reason}")
            raise InvalidTokenError()

        jti = payload.get("jti")
        if not jti or await self.cache.get(f"{REFRESH_KEY_PREFIX}{jti}") != payload["sub"]:
            raise InvalidTokenError("Refresh token has been revoked")

        user = await self.store.get_user(payload["sub"])
        if not user or not user.get("is_active", True):
            raise InvalidTokenError()

        return {
            "access_token": self._access_token(user),
            "token_type": "bearer",
            "expires_in": self.settings.access_token_ttl_seconds,
        }

    async def logout(self, refresh_token: str) -> None:
        """Revoke a refresh token. Unknown, expired or already revoked tokens are a no-op."""
        try:
            payload = decode_token(
                refresh_token,
                self.settings.JWT_SECRET,
                REFRESH_TOKEN_TYPE,
                algorithm=self.settings.JWT_ALGORITHM,
            )
        except TokenDecodeError:
            return

        if payload.get("jti"):
            await self.cache.delete(f"{REFRESH_KEY_PREFIX}{payload['jti']}")
            logger.info(f"User {payload['sub']} logged out")

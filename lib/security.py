# =============================================================================
# lib/security.py - Password Hashing and JWT Helpers
# =============================================================================
# Pure functions for credentials:
# - bcrypt password hashing (one-way, salted)
# - HS256 JWT creation and decoding via python-jose
#
# Access-token verification needs only the signing secret and the clock,
# never a store lookup.
# =============================================================================

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

# bcrypt only looks at the first 72 bytes of the secret
_BCRYPT_MAX_BYTES = 72


class TokenDecodeError(Exception):
    """Raised when a JWT can't be verified."""

    def __init__(self, reason: str, expired: bool = False):
        super().__init__(reason)
        self.reason = reason
        self.expired = expired


# =============================================================================
# Passwords
# =============================================================================

def hash_password(password: str) -> str:
    """
    Hash a password with a fresh bcrypt salt.

    Returns:
        The encoded hash, safe to store in users.password_hash
    """
    secret = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(secret, bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    """
    Check a plaintext password against a stored bcrypt hash.

    Returns False for a missing or malformed hash instead of raising.
    """
    if not password_hash:
        return False
    secret = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(secret, password_hash.encode("utf-8"))
    except ValueError:
        return False


# =============================================================================
# Tokens
# =============================================================================

def create_token(
    subject: str,
    token_type: str,
    secret: str,
    ttl: timedelta,
    algorithm: str = "HS256",
    extra_claims: dict[str, Any] | None = None,
) -> tuple[str, dict[str, Any]]:
    """
    Create a signed JWT.

    Args:
        subject: The user ID (goes into `sub`)
        token_type: "access" or "refresh"
        secret: Signing secret
        ttl: Lifetime from now
        algorithm: JWT algorithm
        extra_claims: Additional claims (email, ...)

    Returns:
        Tuple of (encoded token, claims). Refresh tokens carry a `jti`.
    """
    now = datetime.now(timezone.utc)
    claims: dict[str, Any] = {
        "sub": subject,
        "type": token_type,
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    if token_type == REFRESH_TOKEN_TYPE:
        claims["jti"] = uuid.uuid4().hex
    if extra_claims:
        claims.update(extra_claims)

    token = jwt.encode(claims, secret, algorithm=algorithm)
    return token, claims


def decode_token(
    token: str,
    secret: str,
    expected_type: str,
    algorithm: str = "HS256",
) -> dict[str, Any]:
    """
    Verify a JWT's signature, expiry and type.

    Raises:
        TokenDecodeError: If the token is invalid, expired or of another type
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except ExpiredSignatureError:
        raise TokenDecodeError("Token has expired", expired=True)
    except JWTError as e:
        raise TokenDecodeError(f"Invalid token: {e}")

    if payload.get("type") != expected_type:
        raise TokenDecodeError(f"Expected a {expected_type} token")
    if not payload.get("sub"):
        raise TokenDecodeError("Invalid token: missing user ID")

    return payload

"""
Authentication utilities: Password hashing and JWT token management
"""

import jwt
from datetime import datetime, timedelta, timezone
from passlib.context import CryptContext
from typing import Optional

from config.settings import settings
from models.user import UserClaims

# Password hashing context
pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto"
)

# JWT configuration
ALGORITHM = "HS256"

# Verified against when the email is unknown so both login failures cost the same
_DUMMY_HASH = pwd_context.hash("portfolio-dummy-password")


def hash_password(password: str) -> str:
    """Hash a password using argon2"""
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """Verify a password against its hash. A missing hash never verifies."""
    if password_hash is None:
        pwd_context.verify(password, _DUMMY_HASH)
        return False
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        # Unrecognized or corrupted hash
        return False


def _require_secret() -> str:
    if not settings.jwt_secret_key:
        raise ValueError("JWT_SECRET_KEY is not set. Cannot sign or verify tokens.")
    return settings.jwt_secret_key


def create_jwt(claims: UserClaims, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed token embedding the user's id, email and role"""
    secret = _require_secret()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(claims.id),
        "id": claims.id,
        "email": claims.email,
        "role": claims.role,
        "iat": now,
        "exp": now + (expires_delta or timedelta(hours=settings.jwt_expire_hours)),
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def decode_jwt(token: str) -> Optional[UserClaims]:
    """Decode a JWT token. Returns None if invalid, expired or malformed."""
    secret = _require_secret()
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None

    try:
        return UserClaims(id=payload["id"], email=payload["email"], role=payload["role"])
    except (KeyError, ValueError):
        return None


def create_expired_jwt(claims: UserClaims, expired_seconds_ago: int = 1) -> str:
    """
    Create an expired JWT token for testing purposes.

    Args:
        claims: Identity to include in token
        expired_seconds_ago: How many seconds ago the token should have expired (default: 1)

    Returns:
        Expired JWT token string

    Raises:
        ValueError: If JWT_SECRET_KEY is not set
    """
    return create_jwt(claims, expires_delta=timedelta(seconds=-expired_seconds_ago))

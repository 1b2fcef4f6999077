"""Security utilities for password hashing and JWT handling."""

from datetime import UTC, datetime, timedelta
from typing import Annotated, Any

import bcrypt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from moviematic.config import get_settings
from moviematic.database import get_db
from moviematic.exceptions import (
    AccountDeactivatedError,
    ExpiredTokenError,
    InsufficientPrivilegesError,
    MalformedTokenError,
    MissingTokenError,
    UserNotFoundError,
)
from moviematic.models.user import User

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

# Bearer token scheme; missing credentials are reported by get_current_user
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash a plain text password using bcrypt."""
    password_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain text password against a hashed password."""
    password_bytes = plain_password.encode("utf-8")
    hashed_bytes = hashed_password.encode("utf-8")
    return bcrypt.checkpw(password_bytes, hashed_bytes)


def _encode_token(user_id: int, token_type: str, expires_delta: timedelta) -> str:
    settings = get_settings()
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "type": token_type,
        "exp": datetime.now(UTC) + expires_delta,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    """Create a JWT access token for a user.

    Args:
        user_id: ID of the user the token is issued to.
        expires_delta: Optional custom expiration time. Defaults to
            ACCESS_TOKEN_EXPIRE_DAYS (7 days).

    Returns:
        Encoded JWT token string
    """
    if expires_delta is None:
        expires_delta = timedelta(days=get_settings().access_token_expire_days)
    return _encode_token(user_id, ACCESS_TOKEN_TYPE, expires_delta)


def create_refresh_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    """Create a JWT refresh token for a user (30 days by default)."""
    if expires_delta is None:
        expires_delta = timedelta(days=get_settings().refresh_token_expire_days)
    return _encode_token(user_id, REFRESH_TOKEN_TYPE, expires_delta)


def decode_token(token: str, expected_type: str = ACCESS_TOKEN_TYPE) -> int:
    """Decode and validate a JWT token.

    Args:
        token: The JWT token string to decode
        expected_type: Token type the caller accepts ("access" or "refresh")

    Returns:
        The user ID carried in the "sub" claim

    Raises:
        ExpiredTokenError: If the token is past its validity window
        MalformedTokenError: If the signature, payload or token type is invalid
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except ExpiredSignatureError as e:
        raise ExpiredTokenError() from e
    except JWTError as e:
        raise MalformedTokenError() from e

    if payload.get("type", ACCESS_TOKEN_TYPE) != expected_type:
        raise MalformedTokenError()

    user_id_str = payload.get("sub")
    if user_id_str is None:
        raise MalformedTokenError()

    try:
        return int(user_id_str)
    except (TypeError, ValueError):
        raise MalformedTokenError() from None


async def authenticate_token(db: AsyncSession, token: str, expected_type: str) -> User:
    """Resolve a token to an active user.

    Raises:
        UserNotFoundError: If the user referenced by the token no longer exists
        AccountDeactivatedError: If the user account is inactive
    """
    user_id = decode_token(token, expected_type)

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None:
        raise UserNotFoundError()

    if not user.is_active:
        raise AccountDeactivatedError()

    return user


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: AsyncSession = Depends(get_db),
) -> User:
    """Get the current authenticated, active user from the bearer token.

    This is a FastAPI dependency that validates the JWT token from the
    Authorization header and returns the corresponding user.

    Raises:
        MissingTokenError: If no bearer token was sent
        MalformedTokenError / ExpiredTokenError: If the token is invalid
        UserNotFoundError / AccountDeactivatedError: If the user cannot act
    """
    if credentials is None or not credentials.credentials:
        raise MissingTokenError()

    return await authenticate_token(db, credentials.credentials, ACCESS_TOKEN_TYPE)


async def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Require the current user to have the admin role.

    Raises:
        InsufficientPrivilegesError: If the user is not an admin
    """
    if not current_user.is_admin:
        raise InsufficientPrivilegesError()
    return current_user


# Type aliases for use in route dependencies
CurrentUser = Annotated[User, Depends(get_current_user)]
AdminUser = Annotated[User, Depends(require_admin)]

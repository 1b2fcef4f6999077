"""Authentication API endpoints."""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from moviematic.database import get_db
from moviematic.exceptions import (
    AccountDeactivatedError,
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from moviematic.models.enums import UserRole
from moviematic.models.user import User
from moviematic.schemas.user import (
    AuthResponse,
    PasswordChange,
    ProfileUpdate,
    RefreshRequest,
    TokenPair,
    UserCreate,
    UserLogin,
    UserResponse,
    UserStatusUpdate,
)
from moviematic.utils.security import (
    REFRESH_TOKEN_TYPE,
    AdminUser,
    CurrentUser,
    authenticate_token,
    create_access_token,
    create_refresh_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def issue_tokens(user: User) -> AuthResponse:
    """Build the login payload: the user plus a fresh access/refresh token pair."""
    return AuthResponse(
        user=UserResponse.model_validate(user),
        access_token=create_access_token(user.id),
        refresh_token=create_refresh_token(user.id),
        token_type="bearer",
    )


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
) -> AuthResponse:
    """Register a new user.

    Creates a new account with the "user" role and logs it in.
    The password is securely hashed before storage.

    Raises:
        EmailAlreadyRegisteredError (409): If the email already exists
    """
    email_query = select(User).where(User.email == user_data.email)
    email_result = await db.execute(email_query)
    if email_result.scalar_one_or_none():
        raise EmailAlreadyRegisteredError()

    now = datetime.now(UTC)
    new_user = User(
        email=user_data.email,
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        hashed_password=hash_password(user_data.password),
        role=UserRole.USER.value,
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    db.add(new_user)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        raise EmailAlreadyRegisteredError() from e

    logger.info("Registered user %s", new_user.id)
    return issue_tokens(new_user)


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db),
) -> AuthResponse:
    """Authenticate user and return a token pair.

    Raises:
        InvalidCredentialsError (401): If the email or password is wrong
        AccountDeactivatedError (401): If the user account is inactive
    """
    query = select(User).where(User.email == credentials.email.strip().lower())
    result = await db.execute(query)
    user = result.scalar_one_or_none()

    # Validate user exists and password is correct
    if not user or not verify_password(credentials.password, user.hashed_password):
        raise InvalidCredentialsError()

    if not user.is_active:
        raise AccountDeactivatedError()

    return issue_tokens(user)


@router.post("/refresh", response_model=TokenPair)
async def refresh(
    payload: RefreshRequest,
    db: AsyncSession = Depends(get_db),
) -> TokenPair:
    """Exchange a refresh token for a new access/refresh token pair.

    Access tokens are not accepted here.
    """
    user = await authenticate_token(db, payload.refresh_token, REFRESH_TOKEN_TYPE)
    return TokenPair(
        access_token=create_access_token(user.id),
        refresh_token=create_refresh_token(user.id),
    )


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: CurrentUser) -> UserResponse:
    """Get the current authenticated user's information.

    Requires a valid JWT token in the Authorization header.
    """
    return UserResponse.model_validate(current_user)


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    current_user: CurrentUser,
    profile: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Update the current user's first and/or last name."""
    changes = profile.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in changes.items():
        setattr(current_user, field, value)
    if changes:
        current_user.updated_at = datetime.now(UTC)
        await db.flush()

    return UserResponse.model_validate(current_user)


@router.put("/change-password", response_model=UserResponse)
async def change_password(
    current_user: CurrentUser,
    passwords: PasswordChange,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Change the current user's password.

    Raises:
        InvalidCredentialsError (401): If the current password is wrong
        ValidationError (400): If the new password equals the current one
    """
    if not verify_password(passwords.current_password, current_user.hashed_password):
        raise InvalidCredentialsError("Current password is incorrect")

    if passwords.current_password == passwords.new_password:
        raise ValidationError("New password must differ from the current password")

    current_user.hashed_password = hash_password(passwords.new_password)
    current_user.updated_at = datetime.now(UTC)
    await db.flush()

    return UserResponse.model_validate(current_user)


@router.put("/users/{user_id}/status", response_model=UserResponse)
async def update_user_status(
    user_id: int,
    admin: AdminUser,
    status_update: UserStatusUpdate,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Enable/disable an account or change its role. Admin only.

    Admins cannot deactivate or demote themselves.
    """
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("User not found")

    if user.id == admin.id and (
        status_update.is_active is False or status_update.role == UserRole.USER
    ):
        raise ValidationError("Admins cannot deactivate or demote themselves")

    if status_update.is_active is not None:
        user.is_active = status_update.is_active
    if status_update.role is not None:
        user.role = status_update.role.value
    user.updated_at = datetime.now(UTC)
    await db.flush()

    logger.info(
        "Admin %s set user %s active=%s role=%s", admin.id, user.id, user.is_active, user.role
    )
    return UserResponse.model_validate(user)

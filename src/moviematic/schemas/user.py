"""Pydantic schemas for user and authentication API endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from moviematic.models.enums import UserRole


class UserCreate(BaseModel):
    """Schema for user registration."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    email: EmailStr = Field(description="Valid email address")
    password: str = Field(
        min_length=8,
        max_length=72,
        description="Password (8-72 characters)",
    )
    first_name: str = Field(min_length=1, max_length=100, description="First name")
    last_name: str = Field(min_length=1, max_length=100, description="Last name")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Emails are stored lower-cased so lookups are case-insensitive."""
        return v.lower()


class UserLogin(BaseModel):
    """Schema for user login request."""

    model_config = ConfigDict(extra="forbid")

    email: str = Field(description="Email address")
    password: str = Field(description="Password")


class UserResponse(BaseModel):
    """Response schema for user data (excludes password)."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="User ID")
    email: str = Field(description="Email address")
    first_name: str = Field(description="First name")
    last_name: str = Field(description="Last name")
    role: UserRole = Field(description="Account role")
    is_active: bool = Field(description="Whether the user account is active")
    created_at: datetime = Field(description="When the user was created")


class TokenPair(BaseModel):
    """Access and refresh tokens issued at login."""

    access_token: str = Field(description="JWT access token (7 days)")
    refresh_token: str = Field(description="JWT refresh token (30 days)")
    token_type: str = Field(default="bearer", description="Token type")


class AuthResponse(TokenPair):
    """Response for register and login: the user plus a token pair."""

    user: UserResponse = Field(description="Authenticated user")


class RefreshRequest(BaseModel):
    """Schema for exchanging a refresh token for a new token pair."""

    model_config = ConfigDict(extra="forbid")

    refresh_token: str = Field(min_length=1, description="Refresh token")


class ProfileUpdate(BaseModel):
    """Schema for updating the current user's profile."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)


class PasswordChange(BaseModel):
    """Schema for changing the current user's password."""

    model_config = ConfigDict(extra="forbid")

    current_password: str = Field(description="Current password")
    new_password: str = Field(min_length=8, max_length=72, description="New password")


class UserStatusUpdate(BaseModel):
    """Admin schema for enabling/disabling an account or changing its role."""

    model_config = ConfigDict(extra="forbid")

    is_active: bool | None = Field(default=None, description="Enable or disable the account")
    role: UserRole | None = Field(default=None, description="New role")

    @model_validator(mode="after")
    def require_change(self) -> "UserStatusUpdate":
        if self.is_active is None and self.role is None:
            raise ValueError("At least one of is_active or role is required")
        return self

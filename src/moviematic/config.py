"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # App settings
    app_name: str = "Moviematic API"
    debug: bool = False
    secret_key: str  # Required, no default

    # Database
    database_url: str = "sqlite+aiosqlite:///./moviematic.db"

    # JWT Authentication
    jwt_algorithm: str = "HS256"
    access_token_expire_days: int = 7
    refresh_token_expire_days: int = 30

    # Uploads
    upload_dir: str = "uploads"
    upload_url_prefix: str = "/uploads"
    max_icon_size: int = 2 * 1024 * 1024
    max_image_size: int = 5 * 1024 * 1024

    # CORS
    cors_origins: list[str] = ["http://localhost:5173"]

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v: str, info) -> str:
        """Validate that secret_key is secure."""
        if not v:
            raise ValueError("SECRET_KEY is required")

        # In production mode, ensure secret key is strong
        debug = info.data.get("debug", False)
        if not debug:
            if len(v) < 32:
                raise ValueError("SECRET_KEY must be at least 32 characters in production mode")
            if v in ("your-secret-key-change-in-production", "secret", "password", "changeme"):
                raise ValueError("SECRET_KEY must not be a common weak value")

        return v

    @field_validator("upload_url_prefix")
    @classmethod
    def validate_upload_url_prefix(cls, v: str) -> str:
        """Normalize the prefix to a single leading slash and no trailing slash."""
        return "/" + v.strip("/")

    def validate_runtime_config(self) -> list[str]:
        """Validate runtime configuration and return warnings."""
        warnings = []

        if self.database_url.startswith("sqlite") and not self.debug:
            warnings.append("DATABASE_URL points at SQLite - use a server database in production")

        if "*" in self.cors_origins:
            warnings.append("CORS_ORIGINS allows any origin")

        # Warn about debug mode in production
        if self.debug:
            warnings.append("DEBUG mode is enabled - should be disabled in production")

        return warnings


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""Application settings and configuration.

This module defines all configuration options for the rjilat service.
Settings are loaded from environment variables with sensible defaults.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="rjilat", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Security and authentication
    secret_key: str = Field(default="change-me", alias="SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Database configuration
    database_url: str = Field(default="sqlite:///./rjilat.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Blob storage for uploaded images
    blob_storage_dir: str = Field(default="./uploads", alias="BLOB_STORAGE_DIR")
    blob_base_url: str = Field(default="/uploads", alias="BLOB_BASE_URL")
    blob_folder: str = Field(default="rjilat/posts", alias="BLOB_FOLDER")
    max_upload_bytes: int = Field(default=10 * 1024 * 1024, alias="MAX_UPLOAD_BYTES")
    allowed_image_types: list[str] = Field(
        default=["image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"],
        alias="ALLOWED_IMAGE_TYPES",
    )

    # Feeds and pagination
    default_page_size: int = Field(default=20, alias="DEFAULT_PAGE_SIZE")
    max_page_size: int = Field(default=100, alias="MAX_PAGE_SIZE")
    following_feed_limit: int = Field(default=50, alias="FOLLOWING_FEED_LIMIT")

    # User discovery
    search_min_length: int = Field(default=2, alias="SEARCH_MIN_LENGTH")
    search_results_limit: int = Field(default=20, alias="SEARCH_RESULTS_LIMIT")
    popular_users_limit: int = Field(default=6, alias="POPULAR_USERS_LIMIT")

    # Comment threads: what to do with replies whose parent is gone
    orphan_policy: Literal["drop", "promote"] = Field(default="drop", alias="ORPHAN_POLICY")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def is_sqlite(self) -> bool:
        """Return True when the configured database is SQLite."""
        return self.database_url.startswith("sqlite")


settings = Settings()  # type: ignore[call-arg]

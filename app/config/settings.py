"""
==============================================================================
Application Settings Module
==============================================================================

Configuration management using Pydantic Settings.

This module implements the Singleton pattern to ensure a single global
configuration instance throughout the application lifecycle.

Configuration Priority (highest to lowest):
------------------------------------------
1. Environment variables
2. .env file
3. Default values

Security Considerations:
-----------------------
- Never commit .env files to version control
- Use strong JWT_SECRET_KEY in production
- Change default admin credentials immediately

==============================================================================
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Module logger
logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_name: Display name for the application
        app_env: Environment mode (development/staging/production)
        debug: Enable debug mode for verbose logging
        host: Server bind address
        port: Server port number
        database_url: SQLAlchemy connection string for the document store
        jwt_secret_key: Secret key for JWT token signing
        jwt_algorithm: Algorithm for JWT signing (e.g., HS256)
        access_token_expire_minutes: Access token lifetime in minutes
        refresh_token_expire_days: Refresh token lifetime in days
        admin_username: Catalog administrator login
        admin_password: Catalog administrator password
        blob_directory: Root directory of the product image store
        media_url_prefix: URL prefix the image store is served under
        local_storage_directory: Directory of per-client local storage files
        favorites_key: Local storage entry holding the favorites list
        default_purity: Karat purity used by the price estimator
        default_making_charge: Making charge percentage used by the estimator
        default_gold_rate: Gold rate per gram used by the estimator
        weight_range_default_min: Weight range lower bound with no weights
        weight_range_default_max: Weight range upper bound with no weights
        cors_origins: Allowed CORS origins (JSON array string)

    Example:
        >>> settings = Settings()
        >>> print(settings.app_name)
        'Gold Catalog API'
        >>> print(settings.favorites_key)
        goldShopFavorites
    """

    # =========================================================================
    # PYDANTIC SETTINGS CONFIGURATION
    # =========================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================
    app_name: str = Field(
        default="Gold Catalog API",
        description="Display name for the application"
    )

    app_env: str = Field(
        default="development",
        description="Environment mode: development, staging, production"
    )

    debug: bool = Field(
        default=True,
        description="Enable debug mode for verbose logging"
    )

    # =========================================================================
    # SERVER SETTINGS
    # =========================================================================
    host: str = Field(default="0.0.0.0", description="Server bind address")

    port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Server port number"
    )

    # =========================================================================
    # DOCUMENT STORE SETTINGS
    # =========================================================================
    database_url: str = Field(
        default="sqlite:///./storage/db/catalog.db",
        description="SQLAlchemy connection string for the document store"
    )

    # =========================================================================
    # JWT AUTHENTICATION SETTINGS
    # =========================================================================
    jwt_secret_key: str = Field(
        default="change-this-in-production",
        min_length=16,
        description="Secret key for JWT token signing"
    )

    jwt_algorithm: str = Field(default="HS256", description="Algorithm for JWT signing")

    access_token_expire_minutes: int = Field(
        default=30,
        ge=1,
        le=1440,  # Max 24 hours
        description="Access token lifetime in minutes"
    )

    refresh_token_expire_days: int = Field(
        default=7,
        ge=1,
        le=90,
        description="Refresh token lifetime in days"
    )

    # =========================================================================
    # ADMIN ACCOUNT SETTINGS
    # =========================================================================
    admin_username: str = Field(
        default="admin",
        min_length=3,
        max_length=50,
        description="Catalog administrator login"
    )

    admin_password: str = Field(
        default="admin123",
        min_length=6,
        description="Catalog administrator password"
    )

    # =========================================================================
    # BLOB STORE SETTINGS
    # =========================================================================
    blob_directory: str = Field(
        default="storage/blobs",
        description="Root directory of the product image store"
    )

    media_url_prefix: str = Field(
        default="/media",
        description="URL prefix the image store is served under"
    )

    # =========================================================================
    # CLIENT STORAGE SETTINGS
    # =========================================================================
    local_storage_directory: str = Field(
        default="storage/clients",
        description="Directory of per-client local storage files"
    )

    favorites_key: str = Field(
        default="goldShopFavorites",
        min_length=1,
        description="Local storage entry holding the favorites list"
    )

    # =========================================================================
    # PRICE ESTIMATOR SETTINGS
    # =========================================================================
    default_purity: float = Field(
        default=22,
        gt=0,
        le=24,
        description="Karat purity used by the price estimator"
    )

    default_making_charge: float = Field(
        default=10,
        ge=0,
        description="Making charge percentage used by the price estimator"
    )

    default_gold_rate: float = Field(
        default=0,
        ge=0,
        description="Gold rate per gram used by the price estimator"
    )

    # =========================================================================
    # CATALOG SETTINGS
    # =========================================================================
    weight_range_default_min: int = Field(
        default=0,
        description="Weight range lower bound when no weight parses"
    )

    weight_range_default_max: int = Field(
        default=1000,
        description="Weight range upper bound when no weight parses"
    )

    # =========================================================================
    # CORS SETTINGS
    # =========================================================================
    cors_origins: str = Field(
        default='["*"]',
        description="Allowed CORS origins as JSON array string"
    )

    # =========================================================================
    # VALIDATORS
    # =========================================================================
    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, value: str) -> str:
        """
        Validate and normalize application environment.

        Unknown values fall back to 'development' with a warning.
        """
        valid_envs = {"development", "staging", "production"}
        normalized = value.lower().strip()

        if normalized not in valid_envs:
            logger.warning(
                f"Unknown environment '{value}', defaulting to 'development'"
            )
            return "development"

        return normalized

    @field_validator("jwt_algorithm")
    @classmethod
    def validate_jwt_algorithm(cls, value: str) -> str:
        """
        Validate JWT algorithm is supported.

        Raises:
            ValueError: If algorithm is not supported
        """
        supported = {"HS256", "HS384", "HS512"}

        if value.upper() not in supported:
            raise ValueError(
                f"Unsupported JWT algorithm: {value}. "
                f"Supported: {', '.join(sorted(supported))}"
            )

        return value.upper()

    @field_validator("media_url_prefix")
    @classmethod
    def validate_media_url_prefix(cls, value: str) -> str:
        """Normalize the media prefix to '/name' form."""
        return "/" + value.strip().strip("/")

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================
    @property
    def blob_path(self) -> Path:
        """Get the image store root as Path object."""
        return Path(self.blob_directory)

    @property
    def local_storage_path(self) -> Path:
        """Get the client storage directory as Path object."""
        return Path(self.local_storage_directory)

    @property
    def cors_origins_list(self) -> List[str]:
        """
        Parse CORS origins from JSON string to list.

        Returns:
            List of allowed origin strings
        """
        try:
            origins = json.loads(self.cors_origins)
            if isinstance(origins, list):
                return origins
            return ["*"]
        except json.JSONDecodeError:
            logger.warning(
                f"Invalid CORS origins JSON: {self.cors_origins}, "
                "defaulting to ['*']"
            )
            return ["*"]

    @property
    def access_token_expire_seconds(self) -> int:
        """Get access token expiry in seconds."""
        return self.access_token_expire_minutes * 60

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================
    def get_database_path(self) -> Optional[Path]:
        """
        Extract database file path for SQLite databases.

        Returns:
            Path to database file, or None for non-SQLite or in-memory databases
        """
        if not self.database_url.startswith("sqlite:///"):
            return None
        db_path = self.database_url.replace("sqlite:///", "", 1)
        if not db_path or db_path == ":memory:":
            return None
        if db_path.startswith("./"):
            db_path = db_path[2:]
        return Path(db_path)

    def ensure_directories(self) -> None:
        """
        Create all required directories.

        Creates:
        - Blob store root
        - Client storage directory
        - Database directory (for file-based SQLite)
        """
        self.blob_path.mkdir(parents=True, exist_ok=True)
        self.local_storage_path.mkdir(parents=True, exist_ok=True)

        db_path = self.get_database_path()
        if db_path:
            db_path.parent.mkdir(parents=True, exist_ok=True)

        logger.debug("Required directories created/verified")

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"Settings(app_name={self.app_name!r}, "
            f"app_env={self.app_env!r}, "
            f"debug={self.debug})"
        )


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the global Settings instance (singleton pattern).

    Uses lru_cache to ensure only one Settings instance is created
    throughout the application lifecycle.

    Returns:
        Global Settings instance
    """
    settings = Settings()

    settings.ensure_directories()

    if settings.debug:
        logger.info(f"Configuration loaded: {settings}")

    return settings

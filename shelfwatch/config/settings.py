"""
==============================================================================
Application Settings Module
==============================================================================

Configuration management using Pydantic Settings.

Features:
---------
- Environment variable loading with type validation
- .env file support for local development
- Computed properties for derived values (sender, CORS list, paths)

Configuration Priority (highest to lowest):
------------------------------------------
1. Environment variables
2. .env file
3. Default values

Mail Settings:
-------------
The variable names match the deployment's existing .env file:
EMAIL_HOST, EMAIL_PORT, EMAIL_USER, EMAIL_PASS, EMAIL_TO. EMAIL_FROM is
optional and falls back to EMAIL_USER.

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
        database_url: SQLAlchemy database connection string
        email_host: SMTP server host
        email_port: SMTP server port
        email_user: SMTP login (also the default sender)
        email_pass: SMTP password
        email_from: Explicit sender address
        email_to: Fixed recipient of expiration warnings
        email_secure: Use implicit TLS (SMTP over SSL)
        email_timeout_seconds: Per-send socket timeout
        scheduler_enabled: Run the daily expiration scan
        scan_cron: Crontab expression for the scan trigger
        scheduler_timezone: IANA zone for the trigger (server local if unset)
        cors_origins: Allowed CORS origins (JSON array string)

    Example:
        >>> settings = Settings(email_user="alertas@example.com")
        >>> settings.mail_sender
        'alertas@example.com'
    """

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
        default="Shelfwatch",
        description="Display name for the application"
    )

    app_env: str = Field(
        default="development",
        description="Environment mode: development, staging, production"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode for verbose logging"
    )

    # =========================================================================
    # SERVER SETTINGS
    # =========================================================================
    host: str = Field(
        default="0.0.0.0",
        description="Server bind address"
    )

    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="Server port number"
    )

    # =========================================================================
    # DATABASE SETTINGS
    # =========================================================================
    database_url: str = Field(
        default="sqlite:///./storage/db/shelfwatch.db",
        description="SQLAlchemy database connection string"
    )

    # =========================================================================
    # MAIL SETTINGS
    # =========================================================================
    email_host: str = Field(
        default="localhost",
        description="SMTP server host"
    )

    email_port: int = Field(
        default=587,
        ge=1,
        le=65535,
        description="SMTP server port"
    )

    email_user: str = Field(
        default="",
        description="SMTP login, also used as sender when email_from is empty"
    )

    email_pass: str = Field(
        default="",
        description="SMTP password"
    )

    email_from: str = Field(
        default="",
        description="Sender address"
    )

    email_to: str = Field(
        default="",
        description="Fixed recipient of expiration warnings"
    )

    email_secure: bool = Field(
        default=False,
        description="Connect with implicit TLS instead of plain SMTP"
    )

    email_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Socket timeout for a single send"
    )

    # =========================================================================
    # SCHEDULER SETTINGS
    # =========================================================================
    scheduler_enabled: bool = Field(
        default=True,
        description="Run the daily expiration scan"
    )

    scan_cron: str = Field(
        default="0 0 * * *",
        description="Crontab expression for the expiration scan"
    )

    scheduler_timezone: Optional[str] = Field(
        default=None,
        description="IANA timezone for the trigger; server local time when unset"
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
        """Normalize the environment name, falling back to development."""
        valid_envs = {"development", "staging", "production"}
        normalized = value.lower().strip()

        if normalized not in valid_envs:
            logger.warning(
                f"Unknown environment '{value}', defaulting to 'development'"
            )
            return "development"

        return normalized

    @field_validator("scan_cron")
    @classmethod
    def validate_scan_cron(cls, value: str) -> str:
        """
        Check the trigger has the five crontab fields.

        Field contents are validated by APScheduler when the job is built.

        Raises:
            ValueError: If the expression does not have five fields
        """
        fields = value.split()
        if len(fields) != 5:
            raise ValueError(
                f"scan_cron must have 5 fields (minute hour day month weekday), got: {value!r}"
            )
        return " ".join(fields)

    @field_validator("scheduler_timezone")
    @classmethod
    def validate_scheduler_timezone(cls, value: Optional[str]) -> Optional[str]:
        """Treat blank values as unset."""
        if value is None or not value.strip():
            return None
        return value.strip()

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================
    @property
    def mail_sender(self) -> str:
        """Sender address, defaulting to the SMTP login."""
        return self.email_from or self.email_user

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

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================
    def get_database_path(self) -> Optional[Path]:
        """
        Extract database file path for SQLite databases.

        Returns:
            Path to database file, or None for in-memory and non-SQLite databases
        """
        if self.database_url.startswith("sqlite:///"):
            db_path = self.database_url.replace("sqlite:///", "", 1)
            if not db_path or db_path == ":memory:":
                return None
            if db_path.startswith("./"):
                db_path = db_path[2:]
            return Path(db_path)
        return None

    def ensure_directories(self) -> None:
        """Create the SQLite database directory if one is configured."""
        db_path = self.get_database_path()
        if db_path:
            db_path.parent.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Database directory verified: {db_path.parent}")

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"Settings(app_name={self.app_name!r}, "
            f"app_env={self.app_env!r}, "
            f"debug={self.debug}, "
            f"scheduler_enabled={self.scheduler_enabled})"
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the process-wide Settings instance.

    Returns:
        Cached Settings instance
    """
    settings = Settings()

    if settings.debug:
        logger.info(f"Configuration loaded: {settings}")

    return settings

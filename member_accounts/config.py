"""
Application configuration settings loaded from environment variables.
Uses pydantic_settings for validation and type conversion.
"""
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings class with environment variable validation.

    Attributes:
        database_url: SQLAlchemy connection string (SQLite or PostgreSQL)
        secret_key: Secret key for JWT token signing
        algorithm: Algorithm used for JWT signing (typically HS256)
        access_token_expire_minutes: Access token lifetime in minutes
        bcrypt_rounds: bcrypt cost factor for password hashing

        # Password lifecycle settings
        reset_token_expire_minutes: Lifetime of a password reset token
        verification_code_expire_minutes: Lifetime of an email verification code

        # Email settings (delivery is disabled when mail_server is unset)
        mail_username: SMTP server username
        mail_password: SMTP server password
        mail_from: Sender email address
        mail_port: SMTP server port
        mail_server: SMTP server hostname
        mail_starttls: Whether to use STARTTLS

        # Frontend settings
        frontend_url: URL of the frontend application, used in reset links

        # Bootstrap admin settings (optional)
        bootstrap_admin_email: Email of the first SuperAdmin
        bootstrap_admin_password: Password of the first SuperAdmin
    """
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Database settings
    database_url: str = "sqlite:///./member_accounts.db"

    # JWT settings
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    bcrypt_rounds: int = 12

    # Password lifecycle settings
    reset_token_expire_minutes: int = 30
    verification_code_expire_minutes: int = 60 * 24

    # Email settings
    mail_username: Optional[str] = None
    mail_password: Optional[str] = None
    mail_from: str = "no-reply@member-accounts.local"
    mail_port: int = 587
    mail_server: Optional[str] = None
    mail_starttls: bool = True

    # Frontend settings
    frontend_url: str = "http://localhost:3000"
    cors_origins: List[str] = ["http://localhost:3000"]

    # Bootstrap admin settings (optional - only used for first admin creation)
    bootstrap_admin_email: Optional[str] = None
    bootstrap_admin_password: Optional[str] = None
    bootstrap_admin_name: str = "System Administrator"


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process."""
    return Settings()

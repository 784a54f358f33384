"""
Configuration management for TKMS Backend
"""
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import Optional, List


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Required settings
    DATABASE_URL: str = Field(..., description="Database URL (SQLite or PostgreSQL)")
    JWT_SECRET_KEY: str = Field(..., description="JWT secret key for token signing")

    # Optional settings with defaults
    JWT_ALGORITHM: str = Field(default="HS256", description="JWT algorithm")
    JWT_EXPIRE_MINUTES: int = Field(default=120, description="JWT token expiration in minutes")

    APP_ENV: str = Field(default="local", description="Application environment: local, staging, prod")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level: DEBUG, INFO, WARNING, ERROR")

    # CORS settings
    ALLOWED_ORIGINS: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins. Use '*' for local only."
    )

    # Business timezone: work dates, schedules and lateness are evaluated here; DB stores UTC
    TZ: str = Field(default="Asia/Manila", description="Business timezone for work dates and schedules")

    # Version (can be git SHA or semver)
    VERSION: Optional[str] = Field(default=None, description="Application version (git SHA or semver)")

    # Initial super-admin bootstrap settings
    INITIAL_ADMIN_EMAIL: str = Field(
        default="superadmin@tkms.local",
        description="Email for initial super-admin user (used when no super-admin exists)"
    )
    INITIAL_ADMIN_PASSWORD: str = Field(
        default="Admin@12345",
        description="Password for initial super-admin user (used when no super-admin exists)"
    )

    PASSWORD_RESET_EXPIRE_MINUTES: int = Field(default=60, description="Password reset token lifetime")

    # Uploads: local fallback directory (served at /uploads) and optional S3 bucket
    UPLOAD_DIR: str = Field(default="uploads", description="Local directory for uploaded files")
    AWS_REGION: Optional[str] = Field(default=None, description="AWS region for S3 uploads")
    AWS_ACCESS_KEY_ID: Optional[str] = Field(default=None, description="AWS access key id")
    AWS_SECRET_ACCESS_KEY: Optional[str] = Field(default=None, description="AWS secret access key")
    AWS_S3_BUCKET_NAME: Optional[str] = Field(default=None, description="S3 bucket for uploads")

    # Outgoing mail; disabled unless SMTP_USER and SMTP_PASS are both set
    SMTP_HOST: str = Field(default="smtp.gmail.com", description="SMTP server host")
    SMTP_PORT: int = Field(default=587, description="SMTP server port")
    SMTP_USER: Optional[str] = Field(default=None, description="SMTP login user")
    SMTP_PASS: Optional[str] = Field(default=None, description="SMTP login password")
    SMTP_SECURE: bool = Field(default=False, description="Use implicit TLS (always on for port 465)")
    EMAIL_FROM: Optional[str] = Field(default=None, description="Sender address; defaults to SMTP_USER")
    APP_NAME: str = Field(default="TKMS", description="Display name used as the mail sender")
    APP_URL: str = Field(default="http://localhost:3000", description="Frontend base URL used in mail links")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

    @field_validator("APP_ENV")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        """Validate APP_ENV"""
        allowed = ["local", "staging", "prod"]
        if v not in allowed:
            raise ValueError(f"APP_ENV must be one of {allowed}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate LOG_LEVEL"""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of {allowed}")
        return v.upper()

    @field_validator("TZ")
    @classmethod
    def validate_tz(cls, v: str) -> str:
        """Validate TZ is a known IANA timezone"""
        from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"TZ must be a valid IANA timezone, got {v!r}")
        return v

    def validate_production(self) -> None:
        """
        Validate settings for production environment

        Raises:
            ValueError: If production settings are invalid
        """
        if self.APP_ENV == "prod":
            if len(self.JWT_SECRET_KEY) < 32:
                raise ValueError(
                    "JWT_SECRET_KEY must be at least 32 characters in production environment"
                )

            if self.ALLOWED_ORIGINS == "*" or not self.ALLOWED_ORIGINS:
                raise ValueError(
                    "ALLOWED_ORIGINS must be explicitly set (not '*') in production environment"
                )

    def get_allowed_origins_list(self) -> List[str]:
        """
        Get list of allowed CORS origins

        Returns:
            List of allowed origins (or ['*'] for local)
        """
        if self.ALLOWED_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    def s3_configured(self) -> bool:
        """True when every S3 setting is present"""
        return all([
            self.AWS_REGION,
            self.AWS_ACCESS_KEY_ID,
            self.AWS_SECRET_ACCESS_KEY,
            self.AWS_S3_BUCKET_NAME,
        ])

    def smtp_configured(self) -> bool:
        return bool(self.SMTP_USER and self.SMTP_PASS)


# Create settings instance
settings = Settings()

# Validate production settings if in prod
if settings.APP_ENV == "prod":
    settings.validate_production()

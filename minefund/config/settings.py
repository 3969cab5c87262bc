"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from minefund.config.business_constants import DEFAULT_WITHDRAWAL_TIMEZONE


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    database_echo: bool = False

    # Redis (dramatiq broker)
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str | None = None
    redis_db: int = 0

    # Application
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"
    log_file: str | None = Field(
        default="logs/minefund.log",
        description="Rotated log file path, empty to log to stderr only"
    )
    log_rotation: str = "1 day"
    log_retention: str = "7 days"

    # Referral codes
    referral_code_length: int = Field(
        default=8, ge=6, le=20, description="Length of generated referral codes"
    )

    # Settlement scheduler
    settlement_interval_minutes: int = Field(
        default=60, ge=1, description="Minutes between expired investment settlement runs"
    )

    # Withdrawal window fallback when the settings row has no timezone
    default_withdrawal_timezone: str = DEFAULT_WITHDRAWAL_TIMEZONE

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode='after')
    def validate_production(self) -> 'Settings':
        """Validate production-specific requirements."""
        if self.environment == 'production' and self.debug:
            raise ValueError(
                'DEBUG must be False in production environment. '
                'Set DEBUG=false in your .env file.'
            )
        if self.environment == 'production' and self.database_echo:
            logger.warning(
                'DATABASE_ECHO is enabled in production. '
                'SQL statements (including amounts) will be logged.'
            )
        return self

    @field_validator('database_url')
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL."""
        if not v.startswith(('postgresql://', 'postgresql+asyncpg://')):
            raise ValueError(
                'DATABASE_URL must start with postgresql:// or postgresql+asyncpg://'
            )
        return v

    @field_validator('default_withdrawal_timezone')
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate IANA timezone name."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f'Unknown timezone: {v}') from exc
        return v

    @property
    def async_database_url(self) -> str:
        """Database URL with the asyncpg driver."""
        if self.database_url.startswith('postgresql://'):
            return 'postgresql+asyncpg://' + self.database_url[len('postgresql://'):]
        return self.database_url


# Global settings instance
settings = Settings()

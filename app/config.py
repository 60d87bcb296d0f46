"""
Application configuration with Pydantic Settings for validation and type safety.
Supports environment-specific configurations and .env file loading.
"""

from enum import Enum
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator, model_validator


class Environment(str, Enum):
    """Application environment types"""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """
    Application settings with validation.
    Settings are loaded from environment variables or .env file.
    """

    # Application settings
    app_name: str = Field(default="Haven Budget Engine", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")

    # Database settings
    database_url: str = Field(
        default="postgresql+psycopg2://haven@localhost:5432/haven",
        description="SQLAlchemy connection URL for the backing store",
    )
    db_echo: bool = Field(default=False, description="SQLAlchemy echo SQL statements")
    db_init_attempts: int = Field(
        default=8, ge=1, description="Database connectivity check attempts"
    )
    db_init_delay_sec: float = Field(
        default=2.0, ge=0, description="Delay between connectivity attempts"
    )
    db_create_schema: bool = Field(
        default=False,
        description="Create tables on startup (development only; production schema is pre-existing)",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format string",
    )

    # CORS settings
    cors_origins: list[str] = Field(
        default=["http://localhost:8081", "http://localhost:8000"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=True, description="Allow CORS credentials"
    )
    cors_allow_methods: list[str] = Field(
        default=["*"], description="Allowed HTTP methods"
    )
    cors_allow_headers: list[str] = Field(
        default=["*"], description="Allowed HTTP headers"
    )

    # API settings
    api_prefix: str = Field(default="", description="API route prefix")
    api_title: str = Field(
        default="Haven Budget API", description="API documentation title"
    )
    api_description: str = Field(
        default="Weekly calorie budget engine: baselines, periods, reservations and adherence",
        description="API documentation description",
    )

    # Scheduled jobs
    job_token: str = Field(
        default="",
        description="Bearer credential for the scheduled job endpoints; empty disables them",
    )
    default_timezone: str = Field(
        default="UTC",
        description="IANA time zone used when a profile does not declare one",
    )

    # Budget engine constants
    minimum_safe_calories: int = Field(
        default=1500, ge=0, description="Safety floor for a synthesized daily target"
    )
    baseline_window_days: int = Field(
        default=7, ge=1, description="Length of the baseline observation window"
    )
    baseline_min_qualifying_days: int = Field(
        default=5, ge=1, description="Days with intake required to complete a baseline"
    )
    reservation_other_day_minimum: int = Field(
        default=1200,
        ge=0,
        description="Average the other days of the week must keep when a day is reserved",
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment value"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @model_validator(mode="after")
    def require_job_token_in_production(self):
        """Refuse to start in production without a scheduler credential"""
        if self.is_production() and not self.job_token.strip():
            raise ValueError("JOB_TOKEN must be set in production")
        return self

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment == Environment.DEVELOPMENT

    def is_testing(self) -> bool:
        """Check if running in testing environment"""
        return self.environment == Environment.TESTING


# Global settings instance
settings = Settings()

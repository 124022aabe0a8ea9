"""Application configuration with validation."""

from enum import Enum
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import List


class Environment(str, Enum):
    """Application environment."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class ConfigurationError(Exception):
    """Raised when application configuration is invalid for the environment."""
    pass


DEFAULT_JWT_SECRET = "dev-insecure-key-change-me"


class Settings(BaseSettings):
    """
    Application settings, read from the environment or a ``.env`` file.

    Security-relevant defaults are development friendly; production startup
    refuses to run with them (see ``validate_production_config``).
    """

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development/production)"
    )

    cors_allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:3001",
        description="Allowed CORS origins (comma-separated)"
    )

    # Database
    database_url: str = Field(
        default="sqlite:///./biodata.db",
        description="Database connection URL"
    )
    # Pool tuning applies to PostgreSQL only.
    db_pool_size: int = Field(default=5)
    db_max_overflow: int = Field(default=10)
    db_pool_timeout: int = Field(
        default=30,
        description="Seconds to wait for a pooled connection before raising"
    )
    db_pool_recycle: int = Field(default=1800)

    # Legacy local password login issues HS256 tokens signed with this key.
    jwt_secret_key: str = Field(
        default=DEFAULT_JWT_SECRET,
        description="JWT signing secret (override in production)"
    )
    jwt_algorithm: str = Field(default="HS256")
    jwt_expires_hours: int = Field(default=2)
    auth_enabled: bool = Field(
        default=False,
        description="Require bearer tokens on every endpoint"
    )

    # Identity provider (Okta authorization server)
    okta_issuer: str = Field(
        default="",
        description="Issuer URL, e.g. https://<org>.okta.com/oauth2/default (empty = disabled)"
    )
    okta_client_id: str = Field(default="")
    okta_audience: str = Field(default="api://default")
    okta_jwks_cache_seconds: int = Field(default=3600)

    # Uploaded files
    upload_dir: str = Field(default="uploads")
    max_upload_bytes: int = Field(default=10 * 1024 * 1024)
    allowed_upload_extensions: str = Field(
        default="jpg,jpeg,png,gif,pdf,doc,docx,xls,xlsx,txt,csv",
        description="Comma-separated list of accepted file extensions"
    )

    # Row caps for unpaged listings
    table_row_limit: int = Field(default=500)
    material_list_limit: int = Field(default=200)

    seed_demo_data: bool = Field(
        default=True,
        description="Seed demo users and materials into an empty database"
    )

    rate_limit_per_minute: int = Field(
        default=120,
        description="Maximum requests per client per minute (0 = unlimited)"
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_format: str = Field(
        default="json",
        description="Log output format: 'json' for structured, 'text' for human-readable"
    )

    def get_cors_origins(self) -> List[str]:
        """Parse the comma-separated origin list. Wildcards are refused."""
        origins = [origin.strip() for origin in self.cors_allowed_origins.split(',') if origin.strip()]

        if "*" in origins:
            raise ValueError(
                "Wildcard CORS (*) not allowed. "
                "Specify explicit origins in CORS_ALLOWED_ORIGINS"
            )

        return origins

    def get_upload_extensions(self) -> frozenset:
        return frozenset(
            ext.strip().lower().lstrip(".")
            for ext in self.allowed_upload_extensions.split(",")
            if ext.strip()
        )

    @property
    def okta_enabled(self) -> bool:
        return bool(self.okta_issuer)

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v_upper

    def validate_production_config(self) -> List[str]:
        """Check security-critical settings.

        Returns the list of problems found. In production any problem is
        fatal and raises instead.

        Raises:
            ConfigurationError: If running in production with insecure settings.
        """
        errors: list[str] = []

        if self.jwt_secret_key == DEFAULT_JWT_SECRET:
            errors.append(
                "JWT_SECRET_KEY is using the default insecure value. "
                "Generate a secure key: openssl rand -hex 32"
            )

        if not self.auth_enabled:
            errors.append("AUTH_ENABLED is false; every endpoint is open.")

        origins = self.get_cors_origins()
        localhost_origins = [o for o in origins if "localhost" in o or "127.0.0.1" in o]
        if localhost_origins:
            errors.append(f"CORS allows localhost origins: {localhost_origins}.")

        if errors and self.environment == Environment.PRODUCTION:
            raise ConfigurationError(
                "Production configuration is insecure:\n  - " + "\n  - ".join(errors)
            )
        return errors

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


settings = Settings()

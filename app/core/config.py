import logging
from typing import Optional, List
from urllib.parse import urlsplit

from pydantic import computed_field, Field, AliasChoices, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger("hrcore.config")

# Known insecure default values that must be changed in production
_INSECURE_SECRET_KEYS = {
    "super-insecure-local-dev-secret-do-not-use",
    "changeme",
    "secret",
    "development-secret",
}
_INSECURE_DB_PASSWORDS = {
    "postgres",
    "password",
    "changeme",
}

_DEFAULT_ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
]

# DSN schemes accepted from libpq-style configuration and their async driver equivalent
_ASYNC_DSN_SCHEMES = {
    "postgres": "postgresql+asyncpg",
    "postgresql": "postgresql+asyncpg",
}


def _extract_password_from_database_url(database_url: str | None) -> str | None:
    if not database_url:
        return None
    try:
        return urlsplit(database_url).password
    except ValueError:
        return None


class Settings(BaseSettings):
    # Allow comma-separated env vars for list fields like ALLOWED_ORIGINS
    model_config = SettingsConfigDict(env_file=".env", env_parse_delimiter=",", extra="ignore")
    PROJECT_NAME: str = "HR Core"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    API_PORT: int = 8081
    # Proxies whose X-Forwarded-For uvicorn trusts when resolving the client address
    FORWARDED_ALLOW_IPS: str = "127.0.0.1"

    # CORS
    # Accepts a JSON array or a comma-separated string; normalized below.
    ALLOWED_ORIGINS: List[str] | str = Field(
        default_factory=lambda: list(_DEFAULT_ALLOWED_ORIGINS),
        validation_alias=AliasChoices("ALLOWED_ORIGINS", "CORS_ALLOWED_ORIGINS"),
    )

    # Database settings
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_SERVER: str = Field(
        default="localhost",
        validation_alias=AliasChoices("POSTGRES_SERVER", "POSTGRES_HOST"),
    )
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "hrcore"

    # Connection pool: DB_POOL_SIZE always-ready connections, bounded at DB_POOL_SIZE + DB_MAX_OVERFLOW
    DB_POOL_SIZE: int = Field(default=5, description="Number of persistent DB connections")
    DB_MAX_OVERFLOW: int = Field(default=20, description="Max additional connections under load")

    # Full DB URL. If not provided, we build it from POSTGRES_*.
    DATABASE_URL: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("DATABASE_URL", "DB_DSN", "SQLALCHEMY_DATABASE_URI"),
    )

    SQLALCHEMY_ECHO: bool = False

    # Security settings
    SECRET_KEY: str = Field(
        default="super-insecure-local-dev-secret-do-not-use",
        validation_alias=AliasChoices("JWT_SECRET", "JWT_SECRET_KEY", "SECRET_KEY"),
    )
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 24
    BCRYPT_ROUNDS: int = Field(default=14, ge=4, le=31)

    # Password policy
    MIN_PASSWORD_LENGTH: int = 8

    # Role code required for administrative endpoints
    ADMIN_ROLE_CODE: str = "ADMIN"

    # Audit pipeline
    AUDIT_QUEUE_SIZE: int = Field(default=1000, gt=0)
    AUDIT_SHUTDOWN_TIMEOUT: float = 5.0

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    LOGIN_RATE_LIMIT: str = "10/minute"
    REDIS_URL: Optional[str] = None

    @computed_field
    @property
    def IS_PRODUCTION(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    def model_post_init(self, __context):
        """
        Validate configuration on startup. In production, fail hard if insecure defaults are detected.
        """
        if not self.DATABASE_URL:
            self.DATABASE_URL = (
                f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
                f"@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
            )

        errors = []
        insecure_secret = self.SECRET_KEY in _INSECURE_SECRET_KEYS or len(self.SECRET_KEY) < 32

        if insecure_secret:
            if self.IS_PRODUCTION:
                errors.append(
                    "SECRET_KEY is insecure. Generate a new key with: "
                    "python -c \"import secrets; print(secrets.token_urlsafe(32))\""
                )
            else:
                logger.warning("JWT secret is not set or too short; using an insecure development secret")

        if self.IS_PRODUCTION:
            db_url_password = _extract_password_from_database_url(self.DATABASE_URL)
            if db_url_password and db_url_password in _INSECURE_DB_PASSWORDS:
                errors.append("DATABASE_URL contains an insecure password.")
            if self.DEBUG:
                errors.append("DEBUG must be False in production.")

        if errors:
            error_msg = "Production configuration errors:\n" + "\n".join(f"  - {e}" for e in errors)
            raise ValueError(error_msg)

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def _split_origins(cls, value):
        if isinstance(value, str):
            return [v.strip() for v in value.split(",") if v.strip()]
        return value

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def _use_async_driver(cls, value):
        if not isinstance(value, str) or "://" not in value:
            return value
        scheme, rest = value.split("://", 1)
        return f"{_ASYNC_DSN_SCHEMES.get(scheme, scheme)}://{rest}"


settings = Settings()

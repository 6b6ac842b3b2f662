"""
Application Configuration

Settings are loaded from environment variables (and an optional .env file)
using pydantic-settings. Import the cached ``settings`` instance rather than
constructing ``Settings`` directly.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the admissions API."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    python_env: str = "development"

    # Database (the admissions store is MySQL)
    database_url: str = "mysql+aiomysql://root:@localhost:3306/auth_db"
    database_echo: bool = False
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_pool_recycle: int = 3600

    # Per-query timeout for dashboard sub-queries, in seconds (0 disables)
    query_timeout_seconds: float = 15.0

    # Redis (rate limiting)
    redis_url: str = "redis://localhost:6379/0"

    # CORS - comma separated list of origins, or "*"
    cors_origins: str = "*"

    # JWT
    jwt_secret_key: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    # Password reset
    password_reset_otp_minutes: int = 10
    password_reset_rate_limit: int = 5  # requests per hour per email

    @property
    def is_development(self) -> bool:
        return self.python_env.lower() == "development"

    @property
    def is_production(self) -> bool:
        return self.python_env.lower() == "production"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse the comma separated CORS origins."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()


settings = get_settings()

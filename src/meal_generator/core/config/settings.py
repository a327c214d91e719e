"""Application configuration using Pydantic Settings with YAML support.

Configuration is organised in nested sections loaded from YAML files
(``config/base`` plus ``config/environments/{APP_ENV}``). Secrets come only
from environment variables or ``.env``. Any nested value can be overridden
with the ``__`` delimiter, e.g. ``RATE_LIMITING__DAILY_LIMIT=100``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Annotated

from pydantic import BaseModel, BeforeValidator, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_source import MultiYamlConfigSettingsSource


if TYPE_CHECKING:
    from pydantic_settings import PydanticBaseSettingsSource


def parse_list(v: str | list[str]) -> list[str]:
    """Parse comma-separated string or list into list of strings."""
    if isinstance(v, str):
        return [x.strip() for x in v.split(",") if x.strip()]
    return v


# =============================================================================
# Nested Configuration Models (from YAML)
# =============================================================================


class AppSettings(BaseModel):
    """Application identity settings."""

    name: str = "Meal Generator Service"
    version: str = "0.1.0"
    debug: bool = False


class ServerSettings(BaseModel):
    """Server configuration settings."""

    host: str = "127.0.0.1"
    port: int = 8000


class ApiSettings(BaseModel):
    """API configuration settings."""

    v1_prefix: str = "/api/v1/meal-generator"
    cors_origins: Annotated[list[str], BeforeValidator(parse_list)] = []


class RedisSettings(BaseModel):
    """Shared cache tier (Redis) settings.

    The shared tier is optional; with ``enabled: false`` the service runs on
    the process-local tier only.
    """

    enabled: bool = False
    host: str = "localhost"
    port: int = 6379
    user: str | None = None
    cache_db: int = 0
    max_connections: int = 20
    socket_timeout: float = 2.0


class CacheSettings(BaseModel):
    """TTLs (seconds) for each cache namespace."""

    default_ttl: int = 86400
    recipe_ttl: int = 21600
    ingredient_ttl: int = 86400
    ingredient_failure_ttl: int = 60


class RateLimitingSettings(BaseModel):
    """Per-identity daily request quota."""

    daily_limit: int = Field(default=50, ge=1)


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: str = "INFO"
    format: str = "json"


class OpenAISettings(BaseModel):
    """OpenAI-compatible chat completion endpoint."""

    url: str = "https://api.openai.com/v1"
    model: str = "gpt-4o-mini"
    timeout: float = 60.0
    temperature: float = 0.2
    max_tokens: int = 1200
    requests_per_minute: float = 60.0


class LLMSettings(BaseModel):
    """Recipe generation settings."""

    mock: bool = False
    openai: OpenAISettings = OpenAISettings()


class SpoonacularSettings(BaseModel):
    """Spoonacular ingredient lookup endpoint."""

    url: str = "https://api.spoonacular.com"
    timeout: float = 10.0


class EnrichmentSettings(BaseModel):
    """Nutrition enrichment fan-out settings."""

    concurrency: int = Field(default=5, ge=1)
    lookup_timeout: float = 15.0
    spoonacular: SpoonacularSettings = SpoonacularSettings()


# =============================================================================
# Main Settings Class
# =============================================================================


class Settings(BaseSettings):
    """Application settings with YAML + environment variable support.

    Priority (highest to lowest):
    1. Values passed to Settings()
    2. Environment variables
    3. .env file
    4. Environment-specific YAML files
    5. Base YAML files
    6. Defaults in code
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
        env_nested_delimiter="__",
    )

    APP_ENV: str = "development"

    app: AppSettings = AppSettings()
    server: ServerSettings = ServerSettings()
    api: ApiSettings = ApiSettings()
    redis: RedisSettings = RedisSettings()
    cache: CacheSettings = CacheSettings()
    rate_limiting: RateLimitingSettings = RateLimitingSettings()
    logging: LoggingSettings = LoggingSettings()
    llm: LLMSettings = LLMSettings()
    enrichment: EnrichmentSettings = EnrichmentSettings()

    # =========================================================================
    # Secrets (from .env / environment only - never in YAML)
    # =========================================================================
    OPENAI_API_KEY: str = ""
    SPOONACULAR_API_KEY: str = ""
    REDIS_PASSWORD: str = ""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the YAML source below env/.env and above Docker secrets."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            MultiYamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @property
    def redis_cache_url(self) -> str:
        """Build the Redis URL for the shared cache tier.

        URL format: redis://[user:password@]host:port/db
        """
        auth_part = ""
        if self.redis.user and self.REDIS_PASSWORD:
            auth_part = f"{self.redis.user}:{self.REDIS_PASSWORD}@"
        elif self.REDIS_PASSWORD:
            auth_part = f":{self.REDIS_PASSWORD}@"
        elif self.redis.user:
            auth_part = f"{self.redis.user}@"

        return (
            f"redis://{auth_part}{self.redis.host}:{self.redis.port}/"
            f"{self.redis.cache_db}"
        )

    @property
    def generation_configured(self) -> bool:
        """Whether recipes can be generated (mock mode or an API key)."""
        return self.llm.mock or bool(self.OPENAI_API_KEY)

    @property
    def enrichment_configured(self) -> bool:
        """Whether the ingredient lookup service has credentials."""
        return bool(self.SPOONACULAR_API_KEY)

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.APP_ENV == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.APP_ENV == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in test environment."""
        return self.APP_ENV == "test"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
